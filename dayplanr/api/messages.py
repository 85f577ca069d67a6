from typing import Optional

from dayplanr.config.settings import get_settings

MESSAGES = {
    "en": {
        "missing_settings": "Missing required settings",
        "invalid_settings": "Invalid settings",
        "invalid_day_window": "Day end must be later than day start",
        "invalid_payload": "Invalid data",
        "state_not_found": "No saved state",
        "break_title": "Break",
        "calendar_label": "Plan {date}",
    },
    "pl": {
        "missing_settings": "Brak wymaganych ustawień",
        "invalid_settings": "Nieprawidłowe ustawienia",
        "invalid_day_window": "Koniec dnia musi być później niż początek",
        "invalid_payload": "Nieprawidłowe dane",
        "state_not_found": "Brak zapisanego stanu",
        "break_title": "Przerwa",
        "calendar_label": "Plan {date}",
    },
}


def message(key: str, locale: Optional[str] = None, **params) -> str:
    catalogue = MESSAGES.get(locale or get_settings().locale, MESSAGES["en"])
    text = catalogue.get(key) or MESSAGES["en"].get(key) or MESSAGES["en"]["invalid_payload"]
    return text.format(**params) if params else text
