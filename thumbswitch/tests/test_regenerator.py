"""Tests for Regenerator class."""

from unittest.mock import MagicMock

import pytest

from thumbswitch.attachment_metadata import MetadataGenerator
from thumbswitch.regeneration_progress import RegenerationProgress
from thumbswitch.regenerator import Regenerator, percent_complete


@pytest.mark.parametrize('batch,per_page,total,expected', [
    (0, 10, 25, 40),
    (1, 10, 25, 80),
    (2, 10, 25, 100),
    (0, 10, 80, 13),
    (0, 10, 0, 100),
    (5, 10, 3, 100),
])
def test_percent_complete(batch, per_page, total, expected):
    assert percent_complete(batch, per_page, total) == expected


class TestRegenerator:
    """Tests for Regenerator class."""

    @pytest.fixture
    def attachments(self):
        """Create a mock attachment store with 12 attachments."""
        ids = list(range(12, 0, -1))
        mock = MagicMock()
        mock.get_image_attachment_ids.side_effect = lambda limit, offset=0: ids[offset:offset + limit]
        mock.count_image_attachments.return_value = len(ids)
        mock.get_attachment.return_value = {'id': 1, 'internal_filename': 'abcd1234.jpg'}
        return mock

    @pytest.fixture
    def metadata_generator(self):
        gen = MagicMock(spec=MetadataGenerator)
        gen.generate_attachment_metadata.return_value = {'width': 1000, 'height': 500, 'sizes': {}}
        return gen

    @pytest.fixture
    def regenerator(self, attachments, metadata_generator, base_dir, logger):
        return Regenerator(attachments, metadata_generator, base_dir=base_dir, per_page=10, logger=logger)

    def test_first_batch(self, regenerator, attachments, metadata_generator):
        result = regenerator.regenerate_batch(0)

        assert result == {
            'done': False,
            'batch': 1,
            'percentage': 83,
            'processed': 10,
            'total': 12,
            'errors': 0,
        }
        attachments.get_image_attachment_ids.assert_called_with(10, 0)
        assert metadata_generator.generate_attachment_metadata.call_count == 10
        assert attachments.update_attachment_metadata.call_count == 10

    def test_last_partial_batch(self, regenerator, attachments):
        result = regenerator.regenerate_batch(1)

        assert result['batch'] == 2
        assert result['processed'] == 12
        assert result['percentage'] == 100
        attachments.get_image_attachment_ids.assert_called_with(10, 10)

    def test_empty_page_is_done(self, regenerator):
        result = regenerator.regenerate_batch(2)

        assert result == {
            'done': True,
            'total': 12,
            'message': 'Regenerated thumbnails for 12 images.',
        }

    def test_negative_batch_starts_at_zero(self, regenerator, attachments):
        regenerator.regenerate_batch(-3)

        attachments.get_image_attachment_ids.assert_called_with(10, 0)

    def test_missing_original_is_skipped(self, regenerator, attachments, metadata_generator):
        attachments.get_attachment.return_value = {'id': 1, 'internal_filename': 'gone5678.jpg'}

        stats = regenerator.run()

        metadata_generator.generate_attachment_metadata.assert_not_called()
        assert stats.skipped == 12
        assert stats.regenerated == 0

    def test_errors_are_counted(self, regenerator, metadata_generator):
        metadata_generator.generate_attachment_metadata.side_effect = OSError("broken image")

        result = regenerator.regenerate_batch(0)
        stats = regenerator.run()

        assert result['errors'] == 10
        assert stats.errors == 12
        assert 'broken image' in stats.error_details[0]

    def test_batches_share_no_state(self, regenerator, metadata_generator):
        metadata_generator.generate_attachment_metadata.side_effect = OSError("broken image")

        for _ in range(50):
            result = regenerator.regenerate_batch(0)

        assert result['errors'] == 10
        assert not hasattr(regenerator, 'stats')
        assert len(regenerator.run().error_details) == 12

    def test_run_until_done(self, regenerator, logger):
        progress = RegenerationProgress(logger=logger)

        stats = regenerator.run(progress=progress)

        assert stats.regenerated == 12
        assert stats.batches == 2
        assert stats.total == 12
        assert progress.last_percentage == 100

    def test_run_can_be_stopped(self, regenerator, metadata_generator):
        regenerator.stop()

        stats = regenerator.run()

        assert stats.regenerated == 0
        metadata_generator.generate_attachment_metadata.assert_not_called()
