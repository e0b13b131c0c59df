import httpx
import pytest

from histline.schemas import ProviderStatus, SearchSource
from histline.services.image_provider import UnsplashImageProvider

API_URL = "https://api.unsplash.com/search/photos"


def _photo(i: int, alt: str | None = "A photo") -> dict:
    return {"id": str(i), "urls": {"small": f"https://img.example/{i}.jpg"}, "alt_description": alt}


def _provider(handler, access_key: str | None = "test-key"):
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return UnsplashImageProvider(client, access_key=access_key, api_url=API_URL), client


@pytest.mark.asyncio
async def test_fetch_images_maps_results_and_falls_back_to_caption():
    seen_params = {}

    def handler(request):
        seen_params.update(dict(request.url.params))
        return httpx.Response(200, json={"results": [_photo(1), _photo(2, alt=None)]})

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Rome")

    assert result.status == ProviderStatus.OK
    assert [(i.src, i.alt) for i in result.data] == [
        ("https://img.example/1.jpg", "A photo"),
        ("https://img.example/2.jpg", "Image of Rome"),
    ]
    assert seen_params["query"] == "Rome"
    assert seen_params["per_page"] == "20"
    assert seen_params["client_id"] == "test-key"


@pytest.mark.asyncio
async def test_fetch_images_caps_results_at_page_size():
    def handler(request):
        return httpx.Response(200, json={"results": [_photo(i) for i in range(25)]})

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Rome")

    assert len(result.data) == 20


@pytest.mark.asyncio
async def test_fetch_images_with_no_results_is_ok_and_empty():
    def handler(request):
        return httpx.Response(200, json={"total": 0, "results": []})

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Qwxzy")

    assert result.status == ProviderStatus.OK
    assert result.data == []


@pytest.mark.asyncio
async def test_fetch_images_degrades_on_error_status():
    def handler(request):
        return httpx.Response(401, json={"errors": ["OAuth error: The access token is invalid"]})

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Rome")

    assert result.is_degraded
    assert result.data == []


@pytest.mark.asyncio
async def test_fetch_images_degrades_on_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Rome")

    assert result.is_degraded
    assert "ReadTimeout" in result.reason


@pytest.mark.asyncio
async def test_fetch_images_without_access_key_skips_request():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={"results": []})

    provider, client = _provider(handler, access_key="")
    async with client:
        result = await provider.fetch_images("Rome")

    assert result.is_degraded
    assert calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [
        {"results": ["oops"]},
        {"results": {"a": 1}},
        {"results": [{"urls": ["x"]}]},
        {"results": [None, {"urls": {"small": 42}}]},
        ["not", "an", "object"],
    ],
)
async def test_fetch_images_degrades_on_malformed_payload(payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Rome")

    assert result.is_degraded
    assert result.data == []


@pytest.mark.asyncio
async def test_fetch_images_keeps_wellformed_items_next_to_broken_ones():
    def handler(request):
        return httpx.Response(
            200, json={"results": ["oops", _photo(1), {"urls": ["x"]}]}
        )

    provider, client = _provider(handler)
    async with client:
        result = await provider.fetch_images("Rome")

    assert result.status == ProviderStatus.OK
    assert [i.src for i in result.data] == ["https://img.example/1.jpg"]


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "payload",
    [{"results": ["oops"]}, {"results": {"a": 1}}, {"results": [{"urls": ["x"]}]}],
)
async def test_malformed_image_payload_does_not_fail_search(make_service, store, payload):
    def handler(request):
        return httpx.Response(200, json=payload)

    provider, client = _provider(handler)
    async with client:
        response = await make_service(image_provider=provider).search("Rome")

    assert response.source == SearchSource.GENERATED
    assert response.images == []
    assert (await store.get("rome")).images == []
