import sys
import pathlib

sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))
import pytest

from utils import clean_unicode, get_user_env_var, strip_code_fences


def test_clean_unicode_removes_control_chars():
    """Verify control characters are stripped from nested collections."""

    data = {
        'text': 'Hello\x00World',
        'list': ['A\x01', 'B'],
        'tuple': ('C', 'D\x02'),
    }
    cleaned = clean_unicode(data)
    assert cleaned == {
        'text': 'HelloWorld',
        'list': ['A', 'B'],
        'tuple': ('C', 'D'),
    }


def test_clean_unicode_keeps_paragraph_breaks():
    assert clean_unicode('One.\n\nTwo.\tThree\x07') == 'One.\n\nTwo.\tThree'


def test_clean_unicode_leaves_numbers_alone():
    assert clean_unicode({'moneyChange': -5, 'ok': True}) == {'moneyChange': -5, 'ok': True}


@pytest.mark.parametrize(
    'raw, expected',
    [
        ('```json\n{"a": 1}\n```', '{"a": 1}'),
        ('```\n[1]\n```', '[1]'),
        ('  {"a": 1}  ', '{"a": 1}'),
        ('', ''),
    ],
)
def test_strip_code_fences(raw, expected):
    assert strip_code_fences(raw) == expected


@pytest.mark.skipif(sys.platform.startswith('win'), reason='Windows-specific functionality')
def test_get_user_env_var_reads_from_env(monkeypatch):
    """On non-Windows platforms the helper falls back to os.environ."""

    monkeypatch.delenv('TEST_VAR', raising=False)
    assert get_user_env_var('TEST_VAR') is None

    monkeypatch.setenv('TEST_VAR', 'value')
    assert get_user_env_var('TEST_VAR') == 'value'
