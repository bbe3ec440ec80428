"""Tests for copying referenced images into the export tree."""

from dataclasses import replace

from conftest import InMemoryVault
from exporters.attachment_manager import AttachmentManager
from models import Document


class TestAttachmentManager:
    def test_copies_local_images(self, memory_vault, settings):
        manager = AttachmentManager(memory_vault, settings)
        document = Document.from_path('notes/a.md')

        stats = manager.copy_assets(document, memory_vault.read_text('notes/a.md'))

        assert stats['copied'] == 1
        assert memory_vault.copies == [('notes/img.png', 'out/assets/img.png')]
        assert memory_vault.is_directory('out/assets')

    def test_existing_destination_is_deduplicated(self, settings):
        vault = InMemoryVault({
            'one.md': '![[logo.png]]',
            'two.md': '![](logo.png)',
            'logo.png': 'PNG',
        })
        manager = AttachmentManager(vault, settings)

        manager.copy_assets(Document.from_path('one.md'), vault.read_text('one.md'))
        stats = manager.copy_assets(Document.from_path('two.md'), vault.read_text('two.md'))

        assert stats['deduplicated'] == 1
        assert len(vault.copies) == 1
        assert manager.get_stats()['copied'] == 1
        assert manager.get_stats()['deduplicated'] == 1

    def test_remote_and_missing_images(self, settings):
        vault = InMemoryVault({'page.md': '![](https://example.com/a.png) ![[gone.png]]'})
        manager = AttachmentManager(vault, settings)

        stats = manager.copy_assets(Document.from_path('page.md'), vault.read_text('page.md'))

        assert stats == {
            'total_assets': 2,
            'copied': 0,
            'deduplicated': 0,
            'remote_skipped': 1,
            'failed': 1,
        }
        assert vault.copies == []

    def test_no_images_creates_nothing(self, settings):
        vault = InMemoryVault({'page.md': 'Just [[links]]'})
        manager = AttachmentManager(vault, settings)

        stats = manager.copy_assets(Document.from_path('page.md'), 'Just [[links]]')

        assert stats['total_assets'] == 0
        assert not vault.exists('out/assets')

    def test_per_document_folder(self, memory_vault, settings):
        manager = AttachmentManager(memory_vault, replace(settings, include_file_name=True))

        manager.copy_assets(Document.from_path('notes/a.md'), memory_vault.read_text('notes/a.md'))

        assert memory_vault.copies == [('notes/img.png', 'out/a/assets/img.png')]

    def test_stats_are_a_copy(self, memory_vault, settings):
        manager = AttachmentManager(memory_vault, settings)
        manager.get_stats()['copied'] = 99

        assert manager.get_stats()['copied'] == 0
