from typing import List, Optional, Union
import logging

from bs4 import BeautifulSoup

from og_preview.models.preview_record import PreviewRecord

logger = logging.getLogger(__name__)


def _first_with_attr(soup: BeautifulSoup, attr: str, value: str):
    """First element of any kind whose ``attr`` equals ``value``."""
    return soup.find(attrs={attr: value})


def _content_of(tag) -> Optional[str]:
    content = tag.get("content") if tag else None
    return str(content) if content is not None else None


def _get_title(soup: BeautifulSoup) -> Optional[str]:
    og_title = _first_with_attr(soup, "property", "og:title")
    if og_title is not None:
        return _content_of(og_title)

    title_tag = soup.find("title")
    return title_tag.get_text() if title_tag is not None else None


def _get_description(soup: BeautifulSoup) -> Optional[str]:
    og_description = _first_with_attr(soup, "property", "og:description")
    if og_description is not None:
        return _content_of(og_description)

    return _content_of(_first_with_attr(soup, "name", "description"))


def _get_og_images(soup: BeautifulSoup) -> List[str]:
    """Extract og:image URLs in document order, duplicates included."""
    images = []
    for tag in soup.find_all(attrs={"property": "og:image"}):
        content = _content_of(tag)
        if content is not None:
            images.append(content)

    return images


def extract_preview(html_content: Union[bytes, str]) -> PreviewRecord:
    """
    Parses Open Graph metadata out of an HTML document.

    Open Graph tags win over the plain ``<title>`` and ``meta name=description``
    fallbacks, field by field. A document that parses but carries no metadata
    still produces ``ok=True``. Parse failures are logged and yield the failed
    record instead of raising.
    """
    try:
        soup = BeautifulSoup(html_content, "html.parser")
    except Exception as e:
        logger.error(f"Error parsing document: {e}")
        return PreviewRecord.failed()

    return PreviewRecord(
        ok=True,
        cached=False,
        title=_get_title(soup),
        description=_get_description(soup),
        image=_content_of(_first_with_attr(soup, "property", "og:image")),
        images=_get_og_images(soup),
    )
