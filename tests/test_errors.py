def test_404_json_envelope(client):
    resp = client.get('/no/such/route')
    assert resp.status_code == 404
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 404
    assert isinstance(data.get('message'), str)


def test_unexpected_500_json_envelope(client):
    resp = client.get('/__boom')
    assert resp.status_code == 500
    data = resp.get_json()
    assert data['status'] == 'error'
    assert data['code'] == 500
    assert 'RuntimeError' not in data['message']


def test_ok_helper_endpoint(client):
    resp = client.get('/__ok')
    assert resp.status_code == 200
    data = resp.get_json()
    assert data == {
        'status': 'success',
        'message': 'success',
        'data': {'ping': 'pong'}
    }


def test_service_error_envelope(client):
    resp = client.get('/api/v1/sell/submissions/submission_missing')
    assert resp.status_code == 404
    assert resp.get_json() == {
        'status': 'error',
        'message': 'Submission not found',
        'code': 404,
    }


def test_validation_error_lists_fields(client):
    resp = client.post('/api/v1/checkout', json={'customer_name': 'x'})
    assert resp.status_code == 422
    fields = {e['field'] for e in resp.get_json()['errors']}
    assert 'customer_email' in fields
    assert 'item_ids' in fields
