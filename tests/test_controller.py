"""Client controller against the real API (in-process) and a fake place search."""

from __future__ import annotations

import httpx
import pytest

from bazaar_api.app.main import app
from bazaar_client.api import BazaarAPI
from bazaar_client.controller import ClientController, LocationRequired
from bazaar_client.models import Place
from bazaar_client.places import PlaceSearchError, PlaceSearchProvider
from bazaar_client.storage import LocalStorage


def _places_handler(results: dict, calls: list | None = None):
    """Answer text searches from ``results`` keyed by query text."""

    def handler(request: httpx.Request) -> httpx.Response:
        query = request.url.params["query"]
        if calls is not None:
            calls.append(query)
        if query not in results:
            return httpx.Response(200, json={"status": "ZERO_RESULTS", "results": []})
        return httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {"name": name, "formatted_address": address, "place_id": f"gp-{i}"}
                    for i, (name, address) in enumerate(results[query])
                ],
            },
        )

    return handler


def _controller(tmp_path, handler) -> ClientController:
    api = BazaarAPI(
        base_url="http://testserver",
        client=httpx.AsyncClient(transport=httpx.ASGITransport(app=app)),
    )
    places = PlaceSearchProvider(
        api_key="test-key",
        base_url="http://places.test/place",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    return ClientController(api, places, LocalStorage(str(tmp_path / "storage.json")))


async def _close(controller: ClientController) -> None:
    await controller.api.client.aclose()
    await controller.places.client.aclose()


SEARCH_RESULTS = {
    "Bazaar Ramadhan": [
        ("Bazaar Ramadhan TTDI", "somewhere else"),
        ("Bazaar Ramadhan Bangsar", "Jalan Telawi"),
    ],
    "Mosque": [("Masjid Negara", "Jalan Perdana")],
    "Public Transport Station": [("KL Sentral", "Brickfields")],
}


# ── Startup and search ───────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_start_seeds_official_bazaars_with_tallies(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    await controller.start()
    names = [b.name for b in controller.state.places.bazaars]
    assert len(names) == 8
    assert set(controller.state.votes) == set(names)
    assert all(v == {"up": 0, "down": 0} for v in controller.state.votes.values())
    await _close(controller)


@pytest.mark.asyncio
async def test_search_requires_location(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    with pytest.raises(LocationRequired):
        await controller.search()
    await _close(controller)


@pytest.mark.asyncio
async def test_search_merges_bazaars_by_exact_name(tmp_path):
    calls: list = []
    controller = _controller(tmp_path, _places_handler(SEARCH_RESULTS, calls))
    await controller.start()
    controller.set_location(3.139, 101.6869)

    await controller.search()

    assert sorted(calls) == sorted(SEARCH_RESULTS)
    bazaars = controller.state.places.bazaars
    names = [b.name for b in bazaars]
    assert len(names) == 9
    assert names.count("Bazaar Ramadhan TTDI") == 1
    # the seeded entry wins over the search result with the same name
    ttdi = next(b for b in bazaars if b.name == "Bazaar Ramadhan TTDI")
    assert ttdi.id == "official-2"
    assert names[-1] == "Bazaar Ramadhan Bangsar"
    assert bazaars[-1].id == "place-bazaar-ramadhan-bangsar-1"
    assert [m.name for m in controller.state.places.mosques] == ["Masjid Negara"]
    assert [t.name for t in controller.state.places.transports] == ["KL Sentral"]
    assert controller.state.votes["Bazaar Ramadhan Bangsar"] == {"up": 0, "down": 0}
    assert controller.state.ui.loading is False
    await _close(controller)


@pytest.mark.asyncio
async def test_failed_search_leaves_lists_and_clears_loading(tmp_path):
    def failing(request):
        return httpx.Response(500)

    controller = _controller(tmp_path, failing)
    await controller.start()
    controller.set_location(3.1, 101.6)
    before = controller.state.places.bazaars

    await controller.search()

    assert controller.state.places.bazaars == before
    assert controller.state.ui.loading is False
    await _close(controller)


# ── Place details ────────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_open_place_loads_reviews_and_nearby_transport(tmp_path):
    controller = _controller(
        tmp_path,
        _places_handler({"Public transport near Jalan Tun Mohd Fuad 2": [("MRT TTDI", "TTDI")]}),
    )
    await controller.start()
    place = controller.state.places.bazaars[2]

    await controller.open_place(place)

    assert controller.state.places.selected == place
    assert controller.state.places.reviews == ()
    assert [t.name for t in controller.state.places.transports] == ["MRT TTDI"]
    assert controller.state.places.transports[0].type == "transport"
    await _close(controller)


@pytest.mark.asyncio
async def test_open_place_keeps_transports_when_nothing_nearby(tmp_path):
    controller = _controller(tmp_path, _places_handler(SEARCH_RESULTS))
    await controller.start()
    controller.set_location(3.1, 101.6)
    await controller.search()

    await controller.open_place(controller.state.places.bazaars[0])

    assert [t.name for t in controller.state.places.transports] == ["KL Sentral"]
    await _close(controller)


# ── Votes and favorites ──────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_vote_refetches_tally(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    await controller.start()
    name = controller.state.places.bazaars[0].name

    await controller.vote(name, 1)
    assert controller.state.votes[name] == {"up": 1, "down": 0}

    await controller.vote(name, -1)
    assert controller.state.votes[name] == {"up": 0, "down": 1}
    await _close(controller)


@pytest.mark.asyncio
async def test_preferences_survive_restart(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    controller.toggle_favorite("Bazaar Ramadhan TTDI")
    controller.set_dark_mode(True)
    fingerprint = controller.fingerprint
    await _close(controller)

    reopened = _controller(tmp_path, _places_handler({}))
    await reopened.start()
    assert reopened.fingerprint == fingerprint
    assert reopened.state.favorites == ("Bazaar Ramadhan TTDI",)
    assert reopened.state.ui.dark_mode is True

    reopened.set_active_tab("favorites")
    assert [b.name for b in reopened.visible_bazaars] == ["Bazaar Ramadhan TTDI"]
    await _close(reopened)


def test_unknown_tab_is_rejected(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    with pytest.raises(ValueError):
        controller.set_active_tab("settings")


# ── Auth, subscriptions and reviews ──────────────────────────────────────


@pytest.mark.asyncio
async def test_failed_login_sets_inline_error(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    assert await controller.login("nobody@example.com", "x") is False
    assert controller.state.auth.error == "Invalid credentials"
    assert controller.state.auth.user is None
    await _close(controller)


@pytest.mark.asyncio
async def test_signup_subscribe_and_read_notifications(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    await controller.start()
    assert await controller.signup("aina", "aina@example.com", "secret123") is True
    assert controller.state.auth.user["username"] == "aina"

    await controller.open_place(controller.state.places.bazaars[0])
    assert await controller.subscribe() is True
    await controller.fetch_notifications()
    assert controller.has_unread
    assert "subscribed to updates" in controller.state.auth.notifications[0]["message"]

    await controller.mark_notifications_read()
    assert not controller.has_unread
    await _close(controller)


@pytest.mark.asyncio
async def test_session_is_restored_from_storage(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    await controller.signup("aina", "aina@example.com", "secret123")
    await _close(controller)

    reopened = _controller(tmp_path, _places_handler({}))
    await reopened.start()
    assert reopened.state.auth.user["email"] == "aina@example.com"

    reopened.logout()
    assert reopened.state.auth.user is None
    assert reopened.storage.get_item("token") is None
    await _close(reopened)


@pytest.mark.asyncio
async def test_anonymous_review_asks_for_sign_in(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    await controller.start()
    await controller.open_place(controller.state.places.bazaars[0])

    assert await controller.submit_review(5, "Sedap") is False
    assert controller.state.ui.show_auth_modal is True
    assert await controller.subscribe() is False
    await _close(controller)


@pytest.mark.asyncio
async def test_submit_review_reloads_reviews(tmp_path):
    controller = _controller(tmp_path, _places_handler({}))
    await controller.start()
    await controller.signup("aina", "aina@example.com", "secret123")
    place = controller.state.places.bazaars[0]
    await controller.open_place(place)

    assert await controller.submit_review(4, "Banyak pilihan") is True
    reviews = controller.state.places.reviews
    assert len(reviews) == 1
    assert reviews[0]["user_name"] == "aina"
    assert reviews[0]["place_id"] == place.name
    assert controller.state.ui.submitting_review is False
    await _close(controller)


@pytest.mark.asyncio
async def test_place_with_slash_in_name_keeps_reviews_votes_and_transport(tmp_path):
    controller = _controller(
        tmp_path,
        _places_handler({"Public transport near Jalan SS 6/1": [("LRT Kelana Jaya", "SS 6")]}),
    )
    await controller.start()
    await controller.signup("aina", "aina@example.com", "secret123")
    place = Place(
        id="place-stesen-lrt-kelana-jaya-ss-6-0",
        name="Stesen LRT Kelana Jaya / SS 6",
        address="Jalan SS 6/1",
        maps_uri="",
        type="transport",
    )

    await controller.open_place(place)
    assert [t.name for t in controller.state.places.transports] == ["LRT Kelana Jaya"]

    assert await controller.submit_review(5, "Dekat stesen") is True
    assert [r["place_id"] for r in controller.state.places.reviews] == [place.name]

    await controller.vote(place.name, 1)
    assert controller.state.votes[place.name] == {"up": 1, "down": 0}
    await _close(controller)


# ── Place search provider ────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_place_search_infers_type_and_sends_location():
    seen = {}

    def handler(request):
        seen.update(request.url.params)
        return httpx.Response(
            200,
            json={"status": "OK", "results": [{"name": "Masjid Wilayah", "place_id": "abc"}]},
        )

    provider = PlaceSearchProvider(
        api_key="k",
        base_url="http://places.test/place",
        radius=5000,
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    results = await provider.search("Mosque", 3.1, 101.6)
    assert results == [
        Place(
            id="place-masjid-wilayah-0",
            name="Masjid Wilayah",
            address="",
            maps_uri="https://www.google.com/maps/search/?api=1&query=Masjid%20Wilayah&query_place_id=abc",
            type="mosque",
        )
    ]
    assert seen["location"] == "3.1,101.6"
    assert seen["radius"] == "5000"
    assert seen["key"] == "k"
    await provider.client.aclose()


@pytest.mark.asyncio
async def test_place_search_error_status_raises():
    def handler(request):
        return httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"})

    provider = PlaceSearchProvider(
        api_key="k",
        base_url="http://places.test/place",
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )
    with pytest.raises(PlaceSearchError):
        await provider.search("Bazaar Ramadhan")
    await provider.client.aclose()
