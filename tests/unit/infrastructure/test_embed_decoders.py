"""Tests for the SuperVideo, Dropload and VixCloud embed decoders."""

from __future__ import annotations

from streamhop.infrastructure.hoster_resolvers import dropload, supervideo, vixcloud
from streamhop.infrastructure.hoster_resolvers.vixcloud import with_query

# ---------------------------------------------------------------------------
# SuperVideo
# ---------------------------------------------------------------------------


class TestSuperVideo:
    def test_decodes_stream_and_tracks(self, supervideo_embed_html: str) -> None:
        result = supervideo.decode(supervideo_embed_html, "https://supervideo.cc")
        assert result.stream_url == "https://hfs303.serversicuro.cc/hls/abcdef/master.m3u8"
        assert len(result.subtitles) == 1
        track = result.subtitles[0]
        assert track.title == "Italiano"
        assert track.language == "it"
        assert track.uri == "https://supervideo.cc/subs/abcdef_ita.vtt"
        assert result.cookies == {}

    def test_unpack_supervideo(self, supervideo_embed_html: str) -> None:
        decoded = supervideo.unpack_supervideo(supervideo_embed_html)
        assert decoded.startswith('jwplayer("vplayer").setup({sources:[{file:')

    def test_relative_file_resolved_against_origin(self) -> None:
        html = (
            "<script>eval(function(p,a,c,k,e,r){return p}"
            "('0:\"/hls/abc/master.m3u8\"',36,1,'file'.split('|')))</script>"
        )
        result = supervideo.decode(html, "https://supervideo.tv")
        assert result.stream_url == "https://supervideo.tv/hls/abc/master.m3u8"

    def test_only_base36_is_recognised(self) -> None:
        html = (
            "<script>eval(function(p,a,c,k,e,r){return p}"
            "('0:\"https://x/a.m3u8\"',10,1,'file'.split('|')))</script>"
        )
        assert supervideo.unpack_supervideo(html) == ""
        assert supervideo.decode(html, "https://supervideo.cc").found is False

    def test_packer_without_hls_file(self) -> None:
        html = (
            "<script>eval(function(p,a,c,k,e,r){return p}"
            "('0:\"https://x/a.mp4\"',36,1,'file'.split('|')))</script>"
        )
        result = supervideo.decode(html, "https://supervideo.cc")
        assert result.found is False

    def test_no_packer_keeps_page_cookies(self) -> None:
        html = "<html><script>$.cookie('sv', '1');</script></html>"
        result = supervideo.decode(html, "https://supervideo.cc")
        assert result.found is False
        assert result.cookies == {"sv": "1"}


# ---------------------------------------------------------------------------
# Dropload
# ---------------------------------------------------------------------------


class TestDropload:
    def test_decodes_stream_tracks_and_cookies(self, dropload_embed_html: str) -> None:
        result = dropload.decode(dropload_embed_html, "https://dropload.io")
        assert result.stream_url == "https://cdn.dropload.io/hls2/xyzabc/master.m3u8"
        assert result.cookies == {"file_id": "4821"}
        assert [(t.language, t.uri) for t in result.subtitles] == [
            ("en", "https://dropload.io/subs/xyzabc_eng.vtt"),
        ]

    def test_mp4_when_no_playlist(self) -> None:
        html = (
            "<script>eval(function(p,a,c,k,e,d){return p}"
            "('0:\"https://s1.dropload.io/v/movie.mp4\"',10,1,'file'.split('|')))</script>"
        )
        result = dropload.decode(html, "https://dropload.io")
        assert result.stream_url == "https://s1.dropload.io/v/movie.mp4"

    def test_playlist_preferred_over_mp4(self) -> None:
        html = (
            "<script>eval(function(p,a,c,k,e,d){return p}"
            "('0:\"https://s1.dropload.io/v/movie.mp4\",0:\"https://s1.dropload.io/h/master.m3u8\"'"
            ",10,1,'file'.split('|')))</script>"
        )
        result = dropload.decode(html, "https://dropload.io")
        assert result.stream_url == "https://s1.dropload.io/h/master.m3u8"

    def test_offline_page(self) -> None:
        html = "<html><body><h1>File Not Found</h1></body></html>"
        result = dropload.decode(html, "https://dropload.io")
        assert result.found is False
        assert result.subtitles == ()

    def test_relative_media_not_accepted(self) -> None:
        html = (
            "<script>eval(function(p,a,c,k,e,d){return p}"
            "('0:\"/hls/master.m3u8\"',10,1,'file'.split('|')))</script>"
        )
        assert dropload.decode(html, "https://dropload.io").found is False


# ---------------------------------------------------------------------------
# VixCloud
# ---------------------------------------------------------------------------


class TestVixCloud:
    def test_master_playlist_with_params(self, vixcloud_player_html: str) -> None:
        result = vixcloud.decode(vixcloud_player_html, "https://vixcloud.co")
        assert result.stream_url == (
            "https://vixcloud.co/playlist/271826?b=1&token=f3b1c2&expires=1760000000&asn=&h=1"
        )
        assert result.stream_type == "m3u8"
        assert result.alternate_urls == (
            "https://vixcloud.co/playlist/271826?b=1&ub=1&token=f3b1c2&expires=1760000000",
        )

    def test_every_server_kept(self) -> None:
        html = """<script>
        window.streams = [
            {"name":"Server1","active":false,"url":"https:\\/\\/vixcloud.co\\/playlist\\/9?ub=1"},
            {"name":"Server2","active":true,"url":"https:\\/\\/vixcloud.co\\/playlist\\/9?ab=1"}
        ];
        window.masterPlaylist = {
            params: {'token': 'tok', 'expires': '123', 'asn': ''},
            url: 'https://vixcloud.co/playlist/9',
        }
        </script>"""
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert result.stream_urls == (
            "https://vixcloud.co/playlist/9?token=tok&expires=123&asn=",
            "https://vixcloud.co/playlist/9?ab=1&token=tok&expires=123",
            "https://vixcloud.co/playlist/9?ub=1&token=tok&expires=123",
        )

    def test_params_read_from_master_playlist_block(self) -> None:
        html = """<script>
        window.video = {"csrf_token": 'SESSIONCSRF', "id": 9};
        var config = {xtoken: 'NOPE', expires_at: '1'};
        window.masterPlaylist = {
            params: {'token': 'REALTOKEN', 'expires': '1760000000', 'asn': ''},
            url: 'https://vixcloud.co/playlist/9?b=1',
        }
        </script>"""
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert result.stream_url == (
            "https://vixcloud.co/playlist/9?b=1&token=REALTOKEN&expires=1760000000&asn="
        )

    def test_prefixed_keys_not_taken_for_params(self) -> None:
        html = """<script>
        window.streams = [{"name":"Server1","url":"https://a.vixcloud.co/playlist/9"}];
        var session = {"csrf_token": 'SESSIONCSRF', "token": 'tok'};
        </script>"""
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert result.stream_url == "https://a.vixcloud.co/playlist/9?token=tok"

    def test_master_playlist_without_url_ignores_later_objects(self) -> None:
        html = """<script>
        window.masterPlaylist = {
            params: {'token': 'tok', 'expires': '123', 'asn': ''},
        }
        var analytics = {url: 'https://tracker.example/collect'};
        </script>"""
        assert vixcloud.decode(html, "https://vixcloud.co").found is False

    def test_without_fhd(self, vixcloud_player_html: str) -> None:
        html = vixcloud_player_html.replace("window.canPlayFHD = true", "window.canPlayFHD = false")
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert "h=1" not in result.stream_url
        assert "token=f3b1c2" in result.stream_url

    def test_streams_list_active_entry(self) -> None:
        html = """<script>
        window.streams = [
            {"name":"Server1","active":false,"url":"https:\\/\\/a.vixcloud.co\\/playlist\\/9"},
            {"name":"Server2","active":true,"url":"https:\\/\\/b.vixcloud.co\\/playlist\\/9"}
        ];
        </script>"""
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert result.stream_url == "https://b.vixcloud.co/playlist/9"
        assert result.alternate_urls == ("https://a.vixcloud.co/playlist/9",)
        assert result.stream_type == "m3u8"

    def test_streams_list_first_entry_with_params(self) -> None:
        html = """<script>
        window.streams = [{"name":"Server1","url":"https://a.vixcloud.co/playlist/9"}];
        var params = {'token': 'tok', 'expires': '123', 'asn': ''};
        </script>"""
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert result.stream_url == "https://a.vixcloud.co/playlist/9?token=tok&expires=123"

    def test_download_url(self) -> None:
        html = "<script>window.downloadUrl = 'https://dl.vixcloud.co/v/271826.mp4?t=1'</script>"
        result = vixcloud.decode(html, "https://vixcloud.co")
        assert result.stream_url == "https://dl.vixcloud.co/v/271826.mp4?t=1"
        assert result.stream_type == "mp4"

    def test_nothing_found(self) -> None:
        assert vixcloud.decode("<html></html>", "https://vixcloud.co").found is False
        assert vixcloud.decode("", "https://vixcloud.co").found is False


class TestWithQuery:
    def test_appends(self) -> None:
        assert with_query("https://x/p?b=1", {"t": "2"}) == "https://x/p?b=1&t=2"

    def test_replaces_existing_key(self) -> None:
        assert with_query("https://x/p?t=1&b=1", {"t": "2"}) == "https://x/p?b=1&t=2"

    def test_keeps_blank_values(self) -> None:
        assert with_query("https://x/p", {"asn": ""}) == "https://x/p?asn="
