from dataclasses import dataclass
import os
from dotenv import load_dotenv


load_dotenv()


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    db_path: str = os.getenv("STUDYDESK_DB_PATH", "data/studydesk.db")
    web_mode: bool = _env_bool("STUDYDESK_WEB", "0")
    port: int = _env_int("PORT", 8550)
    log_level: str = os.getenv("STUDYDESK_LOG_LEVEL", "INFO").upper()

    semester_key: str = os.getenv("STUDYDESK_SEMESTER_KEY", "semesterData")
    year_key: str = os.getenv("STUDYDESK_YEAR_KEY", "yearlyData")
    tasks_key: str = os.getenv("STUDYDESK_TASKS_KEY", "calendarTasks")
    last_update_key: str = os.getenv("STUDYDESK_LAST_UPDATE_KEY", "lastSemesterUpdate")

    work_minutes: int = _env_int("STUDYDESK_WORK_MINUTES", 25)
    break_minutes: int = _env_int("STUDYDESK_BREAK_MINUTES", 5)
    long_break_minutes: int = _env_int("STUDYDESK_LONG_BREAK_MINUTES", 15)
    sessions_until_long_break: int = _env_int("STUDYDESK_SESSIONS_UNTIL_LONG_BREAK", 4)


settings = Settings()
