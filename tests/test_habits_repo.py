# tests/test_habits_repo.py
from habits_repo import SQLStorage, make_engine
from local_storage import read_json, write_json


def test_set_get_and_remove(tmp_path):
    # temporary sqlite
    db_file = tmp_path / "test.db"
    storage = SQLStorage(make_engine(str(db_file)))

    storage.set_item("users", "[]")
    storage.set_item("users", '[{"id": "1"}]')   # overwrite, not duplicate

    assert storage.get_item("users") == '[{"id": "1"}]'
    assert storage.keys() == ["users"]

    storage.remove_item("users")
    assert storage.get_item("users") is None
    storage.remove_item("users")   # removing twice is fine


def test_records_persist_across_engines(tmp_path):
    db_url = f"sqlite:///{tmp_path / 'test.db'}"
    write_json(SQLStorage(make_engine(db_url)), "plan_42", {"startDate": "2025-01-01"})

    reopened = SQLStorage(make_engine(db_url))
    assert read_json(reopened, "plan_42") == {"startDate": "2025-01-01"}


def test_set_items_writes_every_record(tmp_path):
    storage = SQLStorage(make_engine(str(tmp_path / "test.db")))
    storage.set_item("plan_1", "old")

    storage.set_items({"plan_1": "{}", "tracking_1": '{"habits": []}'})

    assert storage.keys() == ["plan_1", "tracking_1"]
    assert storage.get_item("plan_1") == "{}"
