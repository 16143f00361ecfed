import tempfile
import unittest
from pathlib import Path
from fastapi.testclient import TestClient
from grocery.api.api_run import app
from grocery.api.routes.grocery import get_service
from grocery.domain.GroceryItem import GroceryItem
from grocery.events import web_observers
from grocery.events.Event_Bus import EventBus
from grocery.infra.Grocery_Repository import GroceryRepository
from grocery.logic.shopping.list_service import GroceryListService
from grocery.logic.shopping.recall import RecallBuffer


class ApiTestCase(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        cls.client = TestClient(app)

    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.bus = EventBus()
        repo = GroceryRepository(Path(self.tmp.name) / "grocery.json", bus=self.bus)
        self.service = GroceryListService(repo, RecallBuffer())
        app.dependency_overrides[get_service] = lambda: self.service

    def tearDown(self):
        app.dependency_overrides.clear()
        self.tmp.cleanup()

    def add(self, text, store_id=None):
        resp = self.client.post('/api/grocery/items', json={'text': text, 'store_id': store_id})
        self.assertEqual(resp.status_code, 201)
        return resp.json()['item']


class TestGroceryAPI(ApiTestCase):

    def test_empty_list(self):
        resp = self.client.get('/api/grocery')
        self.assertEqual(resp.status_code, 200)
        data = resp.json()
        self.assertEqual(data['count'], 0)
        self.assertEqual([s['name'] for s in data['sections']], ['Unassigned'])
        self.assertEqual(data['recent'], [])

    def test_add_and_view(self):
        store = self.service.add_store('Costco')
        item = self.add('Apples 2 lbs', store.id)
        self.assertEqual((item['name'], item['quantity']), ('Apples', '2 lbs'))
        data = self.client.get('/api/grocery').json()
        self.assertEqual([s['name'] for s in data['sections']], ['Costco', 'Unassigned'])
        self.assertEqual(data['sections'][0]['items'][0]['id'], item['id'])

    def test_blank_entry(self):
        resp = self.client.post('/api/grocery/items', json={'text': '   '})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['status'], 'ignored')

    def test_duplicate_then_resolve(self):
        milk = self.add('Milk (2 gallons)')
        resp = self.client.post('/api/grocery/items', json={'text': 'milk (1 gallon)'})
        self.assertEqual(resp.status_code, 200)
        body = resp.json()
        self.assertEqual(body['status'], 'duplicate')
        self.assertEqual(body['pending']['existing']['id'], milk['id'])

        resp = self.client.post('/api/grocery/items/resolve', json={
            'name': 'milk', 'quantity': '1 gallon', 'existing_id': milk['id'], 'resolution': 'merge',
        })
        self.assertEqual(resp.status_code, 200)
        self.assertEqual(resp.json()['item']['quantity'], '2 gallons + 1 gallon')

    def test_resolve_rejects_unknown_resolution(self):
        milk = self.add('Milk')
        resp = self.client.post('/api/grocery/items/resolve', json={
            'name': 'milk', 'existing_id': milk['id'], 'resolution': 'replace',
        })
        self.assertEqual(resp.status_code, 422)

    def test_resolve_missing_existing(self):
        resp = self.client.post('/api/grocery/items/resolve', json={
            'name': 'milk', 'existing_id': 'gone', 'resolution': 'add_anyway',
        })
        self.assertEqual(resp.status_code, 404)

    def test_duplicate_check(self):
        self.add('Eggs')
        self.assertTrue(self.client.get('/api/grocery/duplicates', params={'name': 'EGGS'}).json()['exists'])
        self.assertFalse(self.client.get('/api/grocery/duplicates', params={'name': 'Egg'}).json()['exists'])

    def test_toggle_update_delete(self):
        item = self.add('Bread')
        resp = self.client.post(f"/api/grocery/items/{item['id']}/toggle")
        self.assertTrue(resp.json()['is_checked'])
        resp = self.client.patch(f"/api/grocery/items/{item['id']}", json={'quantity': '2 loaves'})
        self.assertEqual(resp.json()['quantity'], '2 loaves')
        resp = self.client.patch(f"/api/grocery/items/{item['id']}", json={'name': '  '})
        self.assertEqual(resp.status_code, 422)
        resp = self.client.delete(f"/api/grocery/items/{item['id']}")
        self.assertEqual(resp.json()['status'], 'deleted')
        self.assertEqual(self.client.get('/api/grocery/recent').json()['items'][0]['name'], 'Bread')

    def test_unknown_item_is_404(self):
        self.assertEqual(self.client.post('/api/grocery/items/nope/toggle').status_code, 404)
        self.assertEqual(self.client.post('/api/grocery/items/nope/move', json={}).status_code, 404)
        self.assertEqual(self.client.delete('/api/grocery/items/nope').status_code, 404)

    def test_move_endpoints(self):
        store = self.service.add_store('Costco')
        a = self.add('A', store.id)
        b = self.add('B', store.id)
        resp = self.client.post(f"/api/grocery/items/{b['id']}/move", json={'before_id': a['id']})
        self.assertEqual(resp.json()['store_id'], store.id)
        order = [i['name'] for i in self.client.get('/api/grocery').json()['sections'][0]['items']]
        self.assertEqual(order, ['B', 'A'])
        self.client.post(f"/api/grocery/items/{b['id']}/move-down")
        order = [i['name'] for i in self.client.get('/api/grocery').json()['sections'][0]['items']]
        self.assertEqual(order, ['A', 'B'])
        resp = self.client.post(f"/api/grocery/items/{a['id']}/move", json={'store_id': None})
        self.assertIsNone(resp.json()['store_id'])

    def test_rejected_value_is_400_not_404(self):
        self.service.repository.insert_item(GroceryItem('Tape', rank='a0'))
        with self.assertLogs('grocery.api.routes.grocery', level='WARNING'):
            resp = self.client.post('/api/grocery/items', json={'text': 'Milk'})
        self.assertEqual(resp.status_code, 400)
        self.assertIn('Invalid rank key', resp.json()['detail'])

    def test_storage_failure_is_503(self):
        item = self.add('Milk')

        def fail(*args):
            raise OSError('disk full')

        self.service.toggle_checked = fail
        with self.assertLogs('grocery.api.routes.grocery', level='ERROR'):
            resp = self.client.post(f"/api/grocery/items/{item['id']}/toggle")
        self.assertEqual(resp.status_code, 503)

    def test_clear_checked_and_re_add(self):
        item = self.add('Eggs')
        self.add('Milk')
        self.client.post(f"/api/grocery/items/{item['id']}/toggle")
        resp = self.client.post('/api/grocery/clear-checked')
        self.assertEqual(resp.json(), {'deleted_count': 1})
        self.assertEqual([r['name'] for r in self.client.get('/api/grocery').json()['recent']], ['Eggs'])
        resp = self.client.post('/api/grocery/recent/re-add', json={'name': 'Eggs'})
        self.assertEqual(resp.status_code, 201)
        self.assertEqual(self.client.get('/api/grocery/recent').json()['items'], [])

    def test_merge_and_remove_by_name(self):
        item = self.add('Flour x 2')
        resp = self.client.post(f"/api/grocery/items/{item['id']}/merge", json={'quantity': '3'})
        self.assertEqual(resp.json()['quantity'], '2 + 3')
        resp = self.client.post('/api/grocery/remove-by-name', json={'name': 'flour'})
        self.assertEqual(resp.json(), {'removed_count': 1})

    def test_events_feed(self):
        web_observers.stop()
        web_observers.start(self.bus)
        try:
            cursor = self.client.get('/api/grocery/events').json()['next_cursor']
            item = self.add('Milk')
            data = self.client.get('/api/grocery/events', params={'since': cursor}).json()
            self.assertEqual([e['item_id'] for e in data['events']], [item['id']])
            self.assertGreater(data['next_cursor'], cursor)
        finally:
            web_observers.stop()

    def test_health(self):
        self.assertEqual(self.client.get('/health').json(), {'status': 'ok'})


class TestStoresAPI(ApiTestCase):

    def test_create_list_rename_delete(self):
        resp = self.client.post('/api/stores', json={'name': ' Costco ', 'color': '#E31837'})
        self.assertEqual(resp.status_code, 201)
        store = resp.json()
        self.assertEqual(store['name'], 'Costco')
        self.assertEqual([s['name'] for s in self.client.get('/api/stores').json()], ['Costco'])

        resp = self.client.patch(f"/api/stores/{store['id']}", json={'name': 'Costco Wholesale'})
        self.assertEqual(resp.json()['name'], 'Costco Wholesale')
        self.assertEqual(self.client.patch(f"/api/stores/{store['id']}", json={}).status_code, 400)

        item = self.add('Milk', store['id'])
        resp = self.client.delete(f"/api/stores/{store['id']}")
        self.assertEqual(resp.json()['status'], 'deleted')
        sections = self.client.get('/api/grocery').json()['sections']
        self.assertEqual([s['name'] for s in sections], ['Unassigned'])
        self.assertEqual(sections[0]['items'][0]['id'], item['id'])

    def test_invalid_store_input(self):
        self.assertEqual(self.client.post('/api/stores', json={'name': '   '}).status_code, 422)
        self.assertEqual(self.client.post('/api/stores', json={'name': 'Aldi', 'color': 'blue'}).status_code, 422)

    def test_blank_or_null_rename_is_rejected(self):
        store = self.client.post('/api/stores', json={'name': 'Aldi', 'color': '#00A0DF'}).json()
        self.assertEqual(self.client.patch(f"/api/stores/{store['id']}", json={'name': '   '}).status_code, 422)
        self.assertEqual(self.client.patch(f"/api/stores/{store['id']}", json={'name': None}).status_code, 422)
        resp = self.client.patch(f"/api/stores/{store['id']}", json={'color': None})
        self.assertEqual(resp.status_code, 200)
        self.assertEqual((resp.json()['name'], resp.json()['color']), ('Aldi', None))

    def test_unknown_store_is_404(self):
        self.assertEqual(self.client.delete('/api/stores/nope').status_code, 404)
        self.assertEqual(self.client.patch('/api/stores/nope', json={'name': 'x'}).status_code, 404)

    def test_seed(self):
        data = self.client.post('/api/stores/seed').json()
        self.assertTrue(data['seeded'])
        self.assertEqual(data['count'], 4)
        self.assertFalse(self.client.post('/api/stores/seed').json()['seeded'])
