import sys
import pathlib
sys.path.append(str(pathlib.Path(__file__).resolve().parents[1]))

import pytest
from pydantic import ValidationError

from models import GameEngineResponse, Intent, Item, ItemType, SaveGame, StateUpdates


def test_game_response_parsing():
    data = {
        'narrative': 'You wake up.',
        'updates': {
            'statChanges': {'VITALITY': -2, 'CONFIDENCE': 1},
            'relationshipChanges': {'Mitch': {'trust': 5}},
            'moneyChange': -12.5,
            'locationChange': 'home_mitch_livingroom',
            'itemGained': ['und_top_lace_01'],
        },
    }
    response = GameEngineResponse(**data)
    assert response.updates.stat_changes == {'VITALITY': -2, 'CONFIDENCE': 1}
    assert response.updates.relationship_changes['Mitch'].trust == 5
    assert response.updates.relationship_changes['Mitch'].attraction is None
    assert response.updates.money_change == -12.5
    assert response.updates.location_change == 'home_mitch_livingroom'
    assert response.updates.item_gained == ['und_top_lace_01']
    assert response.updates.item_lost == []


def test_updates_are_optional():
    response = GameEngineResponse(narrative='Nothing happens.')
    assert response.updates == StateUpdates()
    assert response.updates.money_change is None


def test_null_updates_mean_no_change():
    response = GameEngineResponse.model_validate({
        'narrative': 'Quiet evening.',
        'updates': {
            'statChanges': None,
            'relationshipChanges': {'Mitch': None, 'Ashley': {'trust': 2}},
            'itemGained': None,
            'itemLost': None,
            'moneyChange': 3,
        },
    })
    assert response.updates.stat_changes == {}
    assert list(response.updates.relationship_changes) == ['Ashley']
    assert response.updates.item_gained == []
    assert response.updates.item_lost == []
    assert response.updates.money_change == 3

    response = GameEngineResponse.model_validate({'narrative': 'Quiet.', 'updates': None})
    assert response.updates == StateUpdates()


def test_updates_accept_field_names():
    updates = StateUpdates(money_change=5, stat_changes={'WIT': 1})
    assert updates.money_change == 5
    assert updates.stat_changes == {'WIT': 1}


def test_item_is_immutable():
    item = Item(id='x', name='X', type='Top', stats={'WIT': 1}, tags=['Neutral'])
    assert item.type is ItemType.TOP
    assert item.tags == ('Neutral',)
    with pytest.raises(ValidationError):
        item.name = 'Y'


def test_unknown_item_type_is_rejected():
    with pytest.raises(ValidationError):
        Item(id='x', name='X', type='Hat')


def test_intent_label():
    assert Intent(type='Lie', manner='Hesitant').label() == 'Lie - Hesitant'
    with pytest.raises(ValidationError):
        Intent(type='Dance', manner='Neutral')


def test_save_game_forbids_extra_fields():
    with pytest.raises(ValidationError):
        SaveGame(state={}, thumbnail='abc')
