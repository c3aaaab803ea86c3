"""Parse PR references from command-line arguments."""

import re

from restack.cli.ensure import fail


def parse_pr_reference(reference: str) -> int:
    """Parse PR number from plain number, #number or GitHub URL.

    Accepts:
      - Plain number: "123"
      - Hash-prefixed number: "#123"
      - GitHub URL: "https://github.com/owner/repo/pull/123"

    Raises:
        SystemExit: If input format is invalid or the number is zero

    Examples:
        >>> parse_pr_reference("123")
        123
        >>> parse_pr_reference("#42")
        42
        >>> parse_pr_reference("https://github.com/owner/repo/pull/456")
        456
        >>> parse_pr_reference("https://github.com/owner/repo/pull/789#issuecomment-123")
        789
    """
    match = re.fullmatch(r"#?(\d+)", reference.strip())
    if match is None:
        match = re.search(r"/pull/(\d+)(?:[/?#].*)?$", reference.strip())

    if match is None or int(match.group(1)) == 0:
        fail(
            f"Invalid PR number or URL: {reference}\n\n"
            + "Expected formats:\n"
            + "  • Plain number: 123\n"
            + "  • GitHub URL: https://github.com/owner/repo/pull/456"
        )

    return int(match.group(1))
