"""Tests for link target resolution."""

from conftest import InMemoryVault
from exporters.target_resolver import TargetResolver, decode_link_name


class TestDecodeLinkName:
    def test_percent_decoding(self):
        assert decode_link_name('My%20Image.png') == 'My Image.png'

    def test_alias_dropped(self):
        assert decode_link_name('Note|Shown text') == 'Note'

    def test_padding_around_alias_trimmed(self):
        assert decode_link_name('img.png | 300') == 'img.png'
        assert decode_link_name(' Note ') == 'Note'

    def test_leading_parent_segments_stripped(self):
        assert decode_link_name('../../img/pic.png') == 'img/pic.png'

    def test_inner_parent_segments_kept(self):
        assert decode_link_name('img/../pic.png') == 'img/../pic.png'


class TestTargetResolver:
    def test_resolves_through_vault(self, memory_vault):
        resolver = TargetResolver(memory_vault)

        target = resolver.resolve('img.png', 'notes/a.md')

        assert target.resolved
        assert target.path == 'notes/img.png'
        assert target.name == 'img.png'
        assert target.extension == '.png'

    def test_resolves_note_without_extension(self, memory_vault):
        target = TargetResolver(memory_vault).resolve('B', 'notes/a.md')

        assert target.resolved
        assert target.path == 'B.md'
        assert target.extension == '.md'

    def test_falls_back_to_source_folder(self, memory_vault):
        target = TargetResolver(memory_vault).resolve('missing.png', 'notes/a.md')

        assert not target.resolved
        assert target.path == 'notes/missing.png'

    def test_ambiguity_falls_back(self):
        vault = InMemoryVault({'x/pic.png': '1', 'y/pic.png': '2'}, strict=True)

        target = TargetResolver(vault).resolve('pic.png', 'notes/a.md')

        assert not target.resolved
        assert target.path == 'notes/pic.png'

    def test_keeps_raw_link_text(self, memory_vault):
        target = TargetResolver(memory_vault).resolve('img.png|200', 'notes/a.md')

        assert target.link_text == 'img.png|200'
        assert target.path == 'notes/img.png'
