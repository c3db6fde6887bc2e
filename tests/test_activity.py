import json

from anilist_cards.activity import recent_activity, respond_with_activity
from anilist_cards.client import AniListError
from conftest import FakeClient, FakeHandler

ACTIVITIES = [{'id': n, 'type': 'ANIME_LIST', 'status': 'watched episode', 'progress': str(n)} for n in range(1, 31)]


def make_client(**kwargs):
    return FakeClient(users={'alice': {'id': 7, 'name': 'alice'}}, activities=ACTIVITIES, **kwargs)


def test_recent_activity_payload():
    status, payload = recent_activity('alice', 5, make_client())
    assert status == 200
    assert payload['user'] == {'id': 7, 'name': 'alice'}
    assert [a['id'] for a in payload['activities']] == [1, 2, 3, 4, 5]


def test_recent_activity_not_found():
    assert recent_activity('ghost', 5, make_client()) == (404, {'message': "User 'ghost' Not Found"})


def test_recent_activity_failure_is_generic():
    status, payload = recent_activity('alice', 5, make_client(error=AniListError('boom')))
    assert status == 500
    assert payload == {'message': 'Error fetching data'}


def test_respond_with_activity_writes_json():
    handler = FakeHandler('/api/activity?username=alice&perPage=2')
    respond_with_activity(handler, make_client())
    assert handler.status == 200
    assert handler.headers['Content-Type'].startswith('application/json')
    assert [a['id'] for a in json.loads(handler.body)['activities']] == [1, 2]


def test_per_page_is_clamped():
    handler = FakeHandler('/api/activity?username=alice&perPage=500')
    respond_with_activity(handler, make_client())
    assert len(json.loads(handler.body)['activities']) == 25

    handler = FakeHandler('/api/activity?username=alice&perPage=abc')
    respond_with_activity(handler, make_client())
    assert len(json.loads(handler.body)['activities']) == 5
