"""Shared test fixtures."""
import pytest
from unittest.mock import patch, MagicMock

from leadgate.ingest.sink import IngestSink
import leadgate.scoring.config as scoring_config_mod


@pytest.fixture(autouse=True)
def reset_scoring_config():
    """Drop the cached scoring config and read the packaged YAML in every test."""
    scoring_config_mod._scoring_config = None
    with patch.object(scoring_config_mod, 'SCORING_CONFIG_PATH', None):
        yield
    scoring_config_mod._scoring_config = None


@pytest.fixture
def mock_sink():
    """IngestSink stand-in that accepts everything."""
    sink = MagicMock(spec=IngestSink)
    sink.ingest.return_value = {'status': 'ok', 'inserted': 1}
    return sink


@pytest.fixture
def backend_target():
    return {
        'id': 'tgt-backend',
        'name': 'Backend',
        'primaryRole': 'Backend Engineer',
        'must': ['python', 'rust'],
        'nice': ['kubernetes', 'postgres'],
        'seniorityPref': 'senior',
        'locationPref': 'berlin',
        'reject': ['clearance required'],
    }


@pytest.fixture
def sample_targets(backend_target):
    """Two target profiles resembling real configuration rows."""
    return [
        backend_target,
        {
            'id': 'tgt-data',
            'name': 'Data',
            'primary_role': 'Data Engineer',
            'must': ['spark', 'airflow'],
            'nice': ['dbt'],
            'seniority_pref': '',
            'location_pref': 'remote',
        },
    ]


@pytest.fixture
def backend_lead():
    """Lead context that matches backend_target strongly."""
    return {
        'role_title': 'Senior Backend Engineer',
        'location': 'Berlin, Germany',
        'seniority': 'Senior',
        'jd_clean': (
            'We are hiring a senior backend engineer to build our payments platform. '
            'You will write Python and Rust services, run them on Kubernetes and '
            'design Postgres schemas with the rest of the team in Berlin.'
        ),
    }
