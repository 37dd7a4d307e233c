"""Parser for problem URLs and slugs."""

import re
from urllib.parse import urlparse

from loguru import logger

from domain.exceptions import URLParsingError

DEFAULT_HOST = "leetcode.com"


class URLParser:
    """Parser for problem-site URLs of the form ``https://<host>/problems/<slug>``."""

    HOST = DEFAULT_HOST
    # Slug segment after /problems/
    SLUG_PATTERN = r"[a-z0-9-]+"
    # Link import pattern matches: list/<id>, studyplan/<slug>, tag/<slug>
    LINK_PATTERN = r"/(list|studyplan|tag)/([^/?#]+)"

    @classmethod
    def problem_pattern(cls, host: str | None = None) -> re.Pattern[str]:
        host = re.escape(host or cls.HOST)
        return re.compile(
            rf"https?://(?:www\.)?{host}/problems/({cls.SLUG_PATTERN})",
            re.IGNORECASE,
        )

    @classmethod
    def extract_slugs(cls, text: str, host: str | None = None) -> list[str]:
        """
        Find every problem URL in free text and return distinct slugs
        in first-occurrence order.
        """
        slugs: dict[str, None] = {}
        for match in cls.problem_pattern(host).finditer(text or ""):
            slug = match.group(1).lower().strip("-")
            if slug:
                slugs.setdefault(slug, None)

        logger.debug(f"Extracted {len(slugs)} distinct slug(s) from text")
        return list(slugs)

    @classmethod
    def parse(cls, url: str) -> str:
        """
        Parse a problem URL and return its slug.
        """
        logger.debug(f"Parsing URL: {url}")

        try:
            parsed = urlparse(url)
            if not parsed.scheme or not parsed.netloc:
                raise URLParsingError(f"Invalid URL format: {url}")
        except ValueError as e:
            raise URLParsingError(f"Failed to parse URL: {url}") from e

        slug = cls.slug_from_url(url)
        if slug and "/problems/" in url:
            logger.info(f"Parsed URL to problem: {slug}")
            return slug

        raise URLParsingError(
            f"Unrecognized problem URL format: {url}. "
            f"Expected format: https://{cls.HOST}/problems/<slug>"
        )

    @classmethod
    def slug_from_url(cls, url: str) -> str:
        """
        Slug of a URL: the segment after ``/problems/`` if present,
        otherwise the last path segment. Query strings are ignored and a
        bare host has no slug.
        """
        path = url.split("?", 1)[0].split("#", 1)[0].strip()
        if "://" in path:
            try:
                path = urlparse(path).path
            except ValueError:
                return ""
        if "/problems/" in path:
            return path.split("/problems/", 1)[1].split("/", 1)[0].lower()
        return path.rstrip("/").rsplit("/", 1)[-1].lower()

    @classmethod
    def parse_link(cls, url: str) -> tuple[str, str]:
        """
        Parse a list, study plan or tag URL into ``(kind, identifier)``.
        """
        match = re.search(cls.LINK_PATTERN, url)
        if match:
            kind, identifier = match.groups()
            logger.info(f"Parsed link to {kind}: {identifier}")
            return kind, identifier

        raise URLParsingError(
            "Unsupported URL format. Please use a list, study plan, or tag URL."
        )

    @classmethod
    def build_problem_url(cls, slug: str, host: str | None = None) -> str:
        """
        Build problem URL from slug.
        """
        url = f"https://{host or cls.HOST}/problems/{slug}/"

        logger.debug(f"Built problem URL: {url}")
        return url


def slug_to_title(slug: str) -> str:
    """``two-sum`` -> ``Two Sum``."""
    return " ".join(word[:1].upper() + word[1:] for word in slug.split("-") if word)


def title_to_slug(title: str) -> str:
    """``Two Sum!`` -> ``two-sum``."""
    return re.sub(r"[^a-z0-9]+", "-", title.lower()).strip("-")


def extract_slugs(text: str, host: str | None = None) -> list[str]:
    """Convenience function for extracting slugs from text."""
    return URLParser.extract_slugs(text, host)
