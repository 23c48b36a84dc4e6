# src/onboarding/services/repo_name_service.py
import re

GITHUB_URL = re.compile(r"github\.com/[^/]+/([^/\s]+)")


def extract_repo_name(value: str) -> str:
    """
    Returns the repository name from a plain name or a GitHub URL.
    e.g. https://github.com/owner/next-investment.git -> next-investment
    """
    match = GITHUB_URL.search(value)
    if match:
        name = match.group(1)
        return name[:-4] if name.endswith(".git") else name
    return value.strip()


def to_title_case(name: str) -> str:
    """kebab-case, snake_case and camelCase to 'Title Case'."""
    spaced = re.sub(r"([a-z])([A-Z])", r"\1 \2", name)
    spaced = re.sub(r"[-_]", " ", spaced)
    return " ".join(word[:1].upper() + word[1:].lower() for word in spaced.split(" "))
