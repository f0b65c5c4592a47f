import pytest

from arpmon.app import create_app
from arpmon.core.scan_engine import ScanEngine


@pytest.fixture
def engine(config, fake_probe, quiet_logger):
    engine = ScanEngine(config, probe=fake_probe, logger=quiet_logger)
    engine.table.set(20, "AA:BB:CC:DD:EE:20")
    engine.table.set(3, "AA:BB:CC:DD:EE:01")
    return engine


@pytest.fixture
def client(engine, quiet_logger):
    app = create_app(engine, logger=quiet_logger)
    app.config['TESTING'] = True
    return app.test_client()


def test_macs(client):
    response = client.get('/macs')

    assert response.status_code == 200
    assert response.mimetype == 'text/plain'
    assert response.get_data(as_text=True) == "AA:BB:CC:DD:EE:01\nAA:BB:CC:DD:EE:20\n"


def test_csv(client):
    response = client.get('/csv')

    assert response.status_code == 200
    assert response.get_data(as_text=True) == (
        "192.168.1.3,AA:BB:CC:DD:EE:01\n"
        "192.168.1.10,AA:BB:CC:DD:EE:01\n"
        "192.168.1.20,AA:BB:CC:DD:EE:20\n"
    )


def test_json(client):
    response = client.get('/json')

    assert response.status_code == 200
    assert response.mimetype == 'application/json'
    assert response.get_json() == {
        "hosts": [
            {"ip": "192.168.1.3", "mac": "AA:BB:CC:DD:EE:01"},
            {"ip": "192.168.1.10", "mac": "AA:BB:CC:DD:EE:01"},
            {"ip": "192.168.1.20", "mac": "AA:BB:CC:DD:EE:20"},
        ]
    }


def test_responses_follow_table_changes(client, engine):
    engine.table.clear(20)

    assert "192.168.1.20" not in client.get('/csv').get_data(as_text=True)


def test_health(client):
    response = client.get('/health')

    assert response.status_code == 200
    data = response.get_json()
    assert data['status'] == 'stopped'
    assert data['workers'] == 4
    assert data['resolved'] == 3
    assert set(data['probe_statistics']) == {'resolved', 'timeout', 'ignored'}


def test_unknown_path_is_404(client):
    response = client.get('/hosts')

    assert response.status_code == 404
    assert response.get_json()['code'] == 404


def test_write_methods_are_rejected(client):
    assert client.post('/json').status_code == 405


def test_url_base(engine, quiet_logger):
    client = create_app(engine, url_base="/arp", logger=quiet_logger).test_client()

    assert client.get('/arp/macs').status_code == 200
    assert client.get('/arp/json').get_json()["hosts"][0]["ip"] == "192.168.1.3"
    assert client.get('/macs').status_code == 404
