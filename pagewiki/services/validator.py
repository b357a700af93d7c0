from typing import Dict, List, Optional

from pagewiki.errors import ValidationError
from pagewiki.models.page_input import PageInput
from pagewiki.services.normalizer import normalize_page_name


def home_name_message(home_page_name: str) -> str:
    return f"You cannot modify home page name. Please keep it {home_page_name}"


def validate_page_input(
    page_input: PageInput,
    home_page_name: str,
    route_name: Optional[str] = None,
) -> None:
    """Raise :class:`ValidationError` with every field-level problem in *page_input*.

    *route_name* is the page the form was posted to; when that is the home
    page, the submitted name must stay the home page name.
    """
    errors: Dict[str, List[str]] = {}

    if not (page_input.name or "").strip():
        errors.setdefault("name", []).append("Name is required")
    elif (
        route_name is not None
        and route_name.lower() == home_page_name.lower()
        and normalize_page_name(page_input.name) != home_page_name.lower()
    ):
        errors.setdefault("name", []).append(home_name_message(home_page_name))

    if not (page_input.content or "").strip():
        errors.setdefault("content", []).append("Content is required")

    if errors:
        raise ValidationError(errors)
