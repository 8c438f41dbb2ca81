"""
RegenerationProgress - Displays regeneration progress on the console.
"""

import logging
from typing import Optional


class RegenerationProgress:
    """
    Reports each batch the way the admin page progress bar does, with
    optional per-attachment output.
    """

    def __init__(
        self,
        show_files: bool = False,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            show_files: If True, print each attachment as it's processed
            logger: Optional logger instance
        """
        self.show_files = show_files
        self.logger = logger or logging.getLogger(__name__)
        self.last_percentage = 0

    def on_attachment(self, attachment_id: int, status: str, detail: Optional[str] = None) -> None:
        """Called for every attachment; status is OK, SKIP or ERROR."""
        if self.show_files:
            suffix = f" -> {detail}" if detail else ""
            print(f"  [{status}] attachment {attachment_id}{suffix}")

    def on_batch(self, result: dict) -> None:
        """Called with the response of every unfinished batch."""
        self.last_percentage = result['percentage']
        self.logger.info(
            f"Progress: {result['percentage']}% ({result['processed']}/{result['total']})"
        )

    def on_done(self, result: dict) -> None:
        self.last_percentage = 100
        self.logger.info(result['message'])
