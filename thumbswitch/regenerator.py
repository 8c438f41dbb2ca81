"""
Regenerator - Rebuilds the sizes of every image attachment, one page at a time.
"""

import logging
import math
import os
import time
from typing import Optional

from . import storage_paths
from .attachment_metadata import MetadataGenerator
from .regeneration_progress import RegenerationProgress
from .regeneration_stats import RegenerationStats

PER_PAGE = 10


def percent_complete(batch: int, per_page: int, total: int) -> int:
    """Percentage done after batch, rounded half up. 100 when there is nothing to do."""
    if total <= 0:
        return 100
    processed = min((batch + 1) * per_page, total)
    return int(math.floor(processed / total * 100 + 0.5))


class Regenerator:
    """
    Regenerates thumbnails in pages of per_page attachments.

    Each call to regenerate_batch is independent: the caller keeps asking
    for the next batch until the response says done.
    """

    def __init__(
        self,
        attachment_db,
        metadata_generator: MetadataGenerator,
        base_dir: Optional[str] = None,
        per_page: int = PER_PAGE,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            attachment_db: Attachment store (AttachmentDb or compatible)
            metadata_generator: Builds derivatives and metadata for one original
            base_dir: Root of the originals/thumbnails tree
            per_page: Attachments per batch
            logger: Optional logger instance
        """
        self.attachments = attachment_db
        self.metadata_generator = metadata_generator
        self.base_dir = base_dir
        self.per_page = per_page
        self.logger = logger or logging.getLogger(__name__)
        self._stop_requested = False

    def stop(self) -> None:
        """Request the loop to stop after the current batch."""
        self._stop_requested = True

    def regenerate_attachment(self, attachment_id: int) -> bool:
        """
        Rebuild the sizes of one attachment.

        Returns:
            False when the attachment or its original file is missing
        """
        record = self.attachments.get_attachment(attachment_id)
        if not record:
            return False

        storename = record['internal_filename']
        file_path = storage_paths.attached_file(storename, self.base_dir)
        if not os.path.exists(file_path):
            self.logger.warning(f"Missing original for attachment {attachment_id}: {file_path}")
            return False

        metadata = self.metadata_generator.generate_attachment_metadata(
            file_path,
            storage_paths.thumbnail_dir(storename, self.base_dir)
        )
        self.attachments.update_attachment_metadata(attachment_id, metadata)
        return True

    def _regenerate_page(self, batch, progress=None):
        """Regenerate one page. Returns the batch response and this page's counts."""
        page = RegenerationStats()
        batch = max(0, int(batch))
        offset = batch * self.per_page
        attachment_ids = self.attachments.get_image_attachment_ids(self.per_page, offset)

        if not attachment_ids:
            page.total = self.attachments.count_image_attachments()
            return {
                'done': True,
                'total': page.total,
                'message': f"Regenerated thumbnails for {page.total} images.",
            }, page

        for attachment_id in attachment_ids:
            try:
                if self.regenerate_attachment(attachment_id):
                    page.regenerated += 1
                    status = 'OK'
                else:
                    page.skipped += 1
                    status = 'SKIP'
                if progress:
                    progress.on_attachment(attachment_id, status)
            except Exception as e:
                error_msg = f"Error regenerating attachment {attachment_id}: {e}"
                self.logger.error(error_msg)
                page.errors += 1
                page.error_details.append(error_msg)
                if progress:
                    progress.on_attachment(attachment_id, 'ERROR', str(e))

        page.total = self.attachments.count_image_attachments()
        page.batches = 1

        return {
            'done': False,
            'batch': batch + 1,
            'percentage': percent_complete(batch, self.per_page, page.total),
            'processed': min((batch + 1) * self.per_page, page.total),
            'total': page.total,
            'errors': page.errors,
        }, page

    def regenerate_batch(
        self,
        batch: int,
        progress: Optional[RegenerationProgress] = None
    ) -> dict:
        """
        Regenerate one page of image attachments.

        Args:
            batch: Zero-based page number
            progress: Optional progress reporter

        Returns:
            {'done': True, 'message', 'total'} once a page comes back empty,
            else {'done': False, 'batch', 'percentage', 'processed', 'total', 'errors'}
        """
        result, _ = self._regenerate_page(batch, progress)
        return result

    def run(
        self,
        start_batch: int = 0,
        progress: Optional[RegenerationProgress] = None,
        cadence: float = 0.0
    ) -> RegenerationStats:
        """
        Keep requesting batches until one reports done, like the admin page does.

        Args:
            start_batch: Batch to start from (resume)
            progress: Optional progress reporter
            cadence: Seconds to wait between batches
        """
        stats = RegenerationStats()
        batch = start_batch

        while not self._stop_requested:
            result, page = self._regenerate_page(batch, progress)
            stats.add(page)
            if result['done']:
                if progress:
                    progress.on_done(result)
                break

            if progress:
                progress.on_batch(result)
            batch = result['batch']

            if cadence > 0:
                time.sleep(cadence)
        else:
            self.logger.info(f"Stop requested, halting before batch {batch}")

        return stats
