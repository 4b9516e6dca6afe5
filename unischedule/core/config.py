# unischedule/core/config.py
import logging
import os
from datetime import date
from functools import lru_cache
from typing import List

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .constants import (DEFAULT_DATASET_PATH, DEFAULT_SEMESTER_END,
                        DEFAULT_SEMESTER_START, SLOT_MINUTES, UID_DOMAIN)
from .date_utils import parse_date_only

LOG_FORMAT = "[%(asctime)s] %(levelname)s - %(name)s - %(message)s"


class Settings(BaseModel):
    """Runtime configuration, read from the environment (and a .env file)."""

    dataset_paths: List[str] = Field(default_factory=lambda: [DEFAULT_DATASET_PATH])
    output_path: str = DEFAULT_DATASET_PATH
    semester_start: date = Field(default_factory=lambda: parse_date_only(DEFAULT_SEMESTER_START))
    semester_end: date = Field(default_factory=lambda: parse_date_only(DEFAULT_SEMESTER_END))
    slot_minutes: int = SLOT_MINUTES
    uid_domain: str = UID_DOMAIN
    log_level: str = "INFO"

    @field_validator("slot_minutes")
    @classmethod
    def validate_slot_minutes(cls, v):
        if v <= 0:
            raise ValueError("Slot length must be a positive number of minutes")
        return v

    class Config:
        frozen = True


def _split_paths(value: str) -> List[str]:
    return [path.strip() for path in value.split(",") if path.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Builds the settings once per process.

    Environment variables: UNISCHEDULE_DATASETS (comma-separated),
    UNISCHEDULE_OUTPUT, UNISCHEDULE_SEMESTER_START, UNISCHEDULE_SEMESTER_END,
    UNISCHEDULE_SLOT_MINUTES, UNISCHEDULE_UID_DOMAIN, LOG_LEVEL.
    """
    load_dotenv()
    return Settings(
        dataset_paths=_split_paths(os.getenv("UNISCHEDULE_DATASETS", DEFAULT_DATASET_PATH)),
        output_path=os.getenv("UNISCHEDULE_OUTPUT", DEFAULT_DATASET_PATH),
        semester_start=parse_date_only(os.getenv("UNISCHEDULE_SEMESTER_START", DEFAULT_SEMESTER_START)),
        semester_end=parse_date_only(os.getenv("UNISCHEDULE_SEMESTER_END", DEFAULT_SEMESTER_END)),
        slot_minutes=int(os.getenv("UNISCHEDULE_SLOT_MINUTES", SLOT_MINUTES)),
        uid_domain=os.getenv("UNISCHEDULE_UID_DOMAIN", UID_DOMAIN),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
    )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
