import json

from conftest import DIALOGUES_DIR, dialogue_document, write_dialogue_file
from dialogue_rating.database.core.bootstrap import populate_dialogues
from dialogue_rating.database.entities.dialogue import Dialogue
from dialogue_rating.database.helpers.transactionManagement import SessionFactory


def stored_dialogues():
    with SessionFactory() as session:
        return {d.dialogue_id: d for d in session.query(Dialogue).all()}


def test_loads_every_dialogue_file_except_manifest(dialogue_files):
    inserted = populate_dialogues()

    dialogues = stored_dialogues()
    assert inserted == 3
    assert set(dialogues) == {"dialogue_7", "dialogue_8", "dialogue_9"}
    kettle = dialogues["dialogue_7"]
    assert kettle.product_id == 7
    assert kettle.product_title == "Electric Kettle"
    assert kettle.kind == 1
    assert kettle.source_file == "product_7.json"
    assert json.loads(kettle.dialogue_data) == dialogue_document(7, "Electric Kettle", 1)


def test_reloading_is_idempotent(dialogue_files):
    assert populate_dialogues() == 3
    assert populate_dialogues() == 0
    assert len(stored_dialogues()) == 3


def test_changed_payload_is_not_rewritten(dialogue_files):
    populate_dialogues()
    write_dialogue_file("product_7.json", dialogue_document(7, "Renamed Kettle", 4))

    assert populate_dialogues() == 0
    assert stored_dialogues()["dialogue_7"].product_title == "Electric Kettle"


def test_new_files_are_picked_up_on_reload(dialogue_files):
    populate_dialogues()
    write_dialogue_file("product_10.json", dialogue_document(10, "Toaster", 2))

    assert populate_dialogues() == 1
    assert "dialogue_10" in stored_dialogues()


def test_bad_files_are_skipped():
    write_dialogue_file("good.json", dialogue_document(1, "Lamp", 2))
    (DIALOGUES_DIR / "broken.json").write_text("{not json", encoding="utf-8")
    write_dialogue_file("no_product.json", {"product_title": "Mystery"})
    write_dialogue_file("list.json", [1, 2, 3])
    write_dialogue_file("list_id.json", {"product_id": [1, 2], "product_title": "Pair"})
    write_dialogue_file("dict_id.json", {"product_id": {"id": 3}, "product_title": "Nested"})
    write_dialogue_file("bool_id.json", {"product_id": True, "product_title": "Flag"})
    write_dialogue_file("word_id.json", {"product_id": "abc", "product_title": "Word"})
    (DIALOGUES_DIR / "notes.txt").write_text("ignored", encoding="utf-8")

    assert populate_dialogues() == 1
    assert set(stored_dialogues()) == {"dialogue_1"}


def test_numeric_string_product_id_is_accepted():
    write_dialogue_file("text_id.json", {**dialogue_document(1, "Lamp", 2), "product_id": "12"})

    assert populate_dialogues() == 1
    assert stored_dialogues()["dialogue_12"].product_id == 12


def test_unknown_kind_is_stored_as_null():
    write_dialogue_file("odd.json", dialogue_document(5, "Chair", 9))
    populate_dialogues()
    assert stored_dialogues()["dialogue_5"].kind is None


def test_missing_directory_loads_nothing(tmp_path):
    assert populate_dialogues(directory=str(tmp_path / "missing")) == 0
    assert stored_dialogues() == {}


def test_explicit_directory_and_manifest(tmp_path):
    write_dialogue_file("a.json", dialogue_document(1, "Lamp", 1), directory=tmp_path)
    write_dialogue_file("all.json", dialogue_document(2, "Everything", 1), directory=tmp_path)

    assert populate_dialogues(directory=str(tmp_path), manifest="all.json") == 1
    assert set(stored_dialogues()) == {"dialogue_1"}
