"""Shared test fixtures for the streamhop test suite."""

from __future__ import annotations

from unittest.mock import AsyncMock

import httpx
import pytest

from streamhop.infrastructure.cache.memory_adapter import MemoryCacheAdapter

# ---------------------------------------------------------------------------
# Embed pages
# ---------------------------------------------------------------------------

# Base-36 eval packer; decodes to a JWPlayer setup with one HLS source and
# one Italian caption track.
SUPERVIDEO_EMBED_HTML = r"""<html><head><title>SuperVideo</title></head><body>
<div id="vplayer"></div>
<script type='text/javascript'>eval(function(p,a,c,k,e,r){while(c--)if(k[c])p=p.replace(new RegExp('\\b'+c.toString(a)+'\\b','g'),k[c]);return p}('0("4").1({2:[{3:"https://hfs303.serversicuro.cc/hls/abcdef/master.m3u8"}],5:[{3:"https://supervideo.cc/subs/abcdef_ita.vtt",label:"Italiano",6:"captions"}]});',36,7,'jwplayer|setup|sources|file|vplayer|tracks|kind'.split('|')))</script>
</body></html>
"""

SUPERVIDEO_STREAM_URL = "https://hfs303.serversicuro.cc/hls/abcdef/master.m3u8"

# Base-10 p.a.c.k.e.r block; the decoded config sets a jQuery cookie and
# carries one caption track plus a thumbnails track.
DROPLOAD_EMBED_HTML = r"""<html><body><div id="vplayer"></div>
<script>eval(function(p,a,c,k,e,d){while(c--)if(k[c])p=p.replace(new RegExp('\\b'+c.toString(a)+'\\b','g'),k[c]);return p}('0("4").1({2:[{3:"https://cdn.dropload.io/hls2/xyzabc/master.m3u8"}],5:[{3:"/subs/xyzabc_eng.vtt",label:"English",6:"captions"},{3:"/thumbs/xyzabc.vtt",6:"thumbnails"}]});$.7(\'8\',\'4821\',{expires:10});',10,9,'jwplayer|setup|sources|file|vplayer|tracks|kind|cookie|file_id'.split('|')))</script>
</body></html>
"""

DROPLOAD_STREAM_URL = "https://cdn.dropload.io/hls2/xyzabc/master.m3u8"

VIXCLOUD_PLAYER_HTML = r"""<html><head><script>
window.video = {"id":271826,"name":"Test Movie"};
window.streams = [{"name":"Server1","active":false,"url":"https:\/\/vixcloud.co\/playlist\/271826?b=1&ub=1"}];
window.masterPlaylist = {
    params: {
        'token': 'f3b1c2',
        'expires': '1760000000',
        'asn': '',
    },
    url: 'https://vixcloud.co/playlist/271826?b=1',
}
window.canPlayFHD = true
</script></head><body><div id="app"></div></body></html>
"""

VIXCLOUD_STREAM_URL = (
    "https://vixcloud.co/playlist/271826?b=1&token=f3b1c2&expires=1760000000&asn=&h=1"
)
VIXCLOUD_ALT_STREAM_URL = (
    "https://vixcloud.co/playlist/271826?b=1&ub=1&token=f3b1c2&expires=1760000000"
)


@pytest.fixture()
def supervideo_embed_html() -> str:
    return SUPERVIDEO_EMBED_HTML


@pytest.fixture()
def dropload_embed_html() -> str:
    return DROPLOAD_EMBED_HTML


@pytest.fixture()
def vixcloud_player_html() -> str:
    return VIXCLOUD_PLAYER_HTML


# ---------------------------------------------------------------------------
# Infrastructure fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
async def memory_cache() -> MemoryCacheAdapter:
    async with MemoryCacheAdapter(ttl_seconds=60) as cache:
        yield cache


@pytest.fixture()
def mock_cache() -> AsyncMock:
    """Mock CachePort."""
    cache = AsyncMock()
    cache.get = AsyncMock(return_value=None)
    cache.set = AsyncMock()
    cache.delete = AsyncMock(return_value=True)
    cache.clear = AsyncMock()
    cache.aclose = AsyncMock()
    return cache


@pytest.fixture()
def mock_base_url_resolver() -> AsyncMock:
    """BaseUrlResolverPort that never knows a live domain."""
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value="")
    return resolver
