from dataclasses import dataclass
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

from academetrics.core.grades import DEFAULT_GRADE_TABLE, GradeScaleError, GradeTable


load_dotenv()


class SettingsError(Exception):
    pass


def _int_env(name: str, default: str) -> int:
    value = os.getenv(name, default).strip()
    try:
        return int(value)
    except ValueError as exc:
        raise SettingsError(f"{name} must be an integer, got {value!r}") from exc


@dataclass(frozen=True)
class Settings:
    round_to: int = _int_env("ACADEMETRICS_ROUND_TO", "2")
    cgpa_policy: str = os.getenv("ACADEMETRICS_CGPA_POLICY", "two_stage").strip().lower()
    grade_scale_path: str = os.getenv("ACADEMETRICS_GRADE_SCALE_PATH", "").strip()
    log_level: str = os.getenv("ACADEMETRICS_LOG_LEVEL", "WARNING").strip().upper()

    def grade_table(self) -> GradeTable:
        if not self.grade_scale_path:
            return DEFAULT_GRADE_TABLE
        return load_grade_table(self.grade_scale_path)


def load_grade_table(path: str) -> GradeTable:
    scale_file = Path(path)
    try:
        rows = json.loads(scale_file.read_text(encoding="utf-8"))
    except OSError as exc:
        raise SettingsError(f"Could not read grade scale {scale_file}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise SettingsError(f"Grade scale {scale_file} is not valid JSON") from exc

    if not isinstance(rows, list):
        raise SettingsError(f"Grade scale {scale_file} must be a JSON array")

    try:
        return GradeTable.from_rows(rows)
    except GradeScaleError as exc:
        raise SettingsError(f"Invalid grade scale {scale_file}: {exc}") from exc


def configure_logging(level: str = "") -> None:
    logging.basicConfig(
        level=(level or settings.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


settings = Settings()
