import json
import sqlite3

import pytest

from movieWatch.metadata.core.models import MovieDetails, WatchedRecord, WatchedSummary
from movieWatch.metadata.core.repo import WatchedListStore
from movieWatch.metadata.movie_watch_db import LocalStorage


def _rec(imdb_id="tt1", title="Batman", user_rating=8, runtime=126, imdb_rating=7.5):
    return WatchedRecord(
        imdb_id=imdb_id,
        title=title,
        user_rating=user_rating,
        runtime=runtime,
        imdb_rating=imdb_rating,
        poster="http://img.test/p.jpg",
        year="1989",
    )


def _fresh_store(db_path):
    store = WatchedListStore(LocalStorage(db_path))
    store.load_initial()
    return store


def test_missing_storage_loads_empty(store):
    assert store.records == ()
    assert len(store) == 0


def test_round_trip_across_fresh_stores(store, db_path):
    r1, r2 = _rec("tt1"), _rec("tt2", title="Batman Returns", runtime=None, imdb_rating=None)
    store.add(r1)
    store.add(r2)

    assert _fresh_store(db_path).records == (r1, r2)


def test_duplicate_id_is_rejected(store, storage, log_path):
    assert store.add(_rec("tt1", user_rating=8)) is True
    assert store.add(_rec("tt1", user_rating=3)) is False

    assert [r.user_rating for r in store.records] == [8]
    assert len(json.loads(storage.get("watched"))) == 1
    assert "rejected duplicate" in log_path.read_text()


def test_remove_absent_id_is_noop(store, storage):
    store.add(_rec("tt1"))
    before = storage.get("watched")

    store.remove("tt404")

    assert [r.imdb_id for r in store.records] == ["tt1"]
    assert storage.get("watched") == before


def test_add_then_delete_persists_empty_list(store, storage, db_path):
    store.add(_rec("tt1"))
    store.remove("tt1")

    assert store.records == ()
    assert json.loads(storage.get("watched")) == []
    assert _fresh_store(db_path).records == ()


def test_persisted_shape_uses_omdb_style_keys(store, storage):
    store.add(_rec("tt1"))

    row = json.loads(storage.get("watched"))[0]
    assert row == {
        "imdbID": "tt1",
        "title": "Batman",
        "year": "1989",
        "poster": "http://img.test/p.jpg",
        "runtime": 126,
        "imdbRating": 7.5,
        "userRating": 8,
    }


@pytest.mark.parametrize("raw", [
    "{not json",
    json.dumps({"imdbID": "tt1"}),
    json.dumps([{"title": "missing id"}]),
    json.dumps([{"imdbID": "tt1", "title": "x", "userRating": 42}]),
    json.dumps(["tt1"]),
    json.dumps([{"imdbID": "tt1", "title": "x", "userRating": 5, "runtime": 1e999}]),
    "[" * 100_000 + "]" * 100_000,
])
def test_corrupt_storage_falls_back_to_empty(storage, db_path, raw, log_path):
    storage.set("watched", raw)

    assert _fresh_store(db_path).records == ()
    assert "corrupt" in log_path.read_text()


def test_stored_duplicates_collapse_to_first(storage, db_path):
    rows = [_rec("tt1", user_rating=9).to_json(), _rec("tt1", user_rating=2).to_json()]
    storage.set("watched", json.dumps(rows))

    store = _fresh_store(db_path)

    assert [r.user_rating for r in store.records] == [9]


def test_load_initial_runs_once(store, storage):
    storage.set("watched", json.dumps([_rec("tt9").to_json()]))

    store.load_initial()

    assert store.records == ()


def test_write_failure_is_logged_and_kept_in_memory(store, storage, monkeypatch, log_path):
    def broken(key, value):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(storage, "set", broken)

    assert store.add(_rec("tt1")) is True
    assert "tt1" in store
    assert "write failed" in log_path.read_text()


def test_lookups(store):
    r = _rec("tt1")
    store.add(r)

    assert store.get("tt1") == r
    assert store.get("tt2") is None
    assert "tt1" in store
    assert list(store) == [r]


def test_summary_averages_skip_missing_values(store):
    store.add(_rec("tt1", user_rating=8, runtime=120, imdb_rating=7.0))
    store.add(_rec("tt2", user_rating=6, runtime=None, imdb_rating=9.0))

    assert store.summary() == WatchedSummary(
        count=2, avg_imdb_rating=8.0, avg_user_rating=7.0, avg_runtime=120.0,
    )


def test_summary_of_empty_list_is_zero(store):
    assert store.summary() == WatchedSummary()


@pytest.mark.parametrize("kwargs", [
    {"imdb_id": ""},
    {"user_rating": 11},
    {"user_rating": -1},
    {"imdb_rating": 10.5},
    {"runtime": -3},
    {"year": 1989},
])
def test_record_validation(kwargs):
    base = {"imdb_id": "tt1", "title": "Batman", "user_rating": 5}
    with pytest.raises(ValueError):
        WatchedRecord(**{**base, **kwargs})


def test_record_from_details():
    details = MovieDetails(imdb_id="tt1", title="Batman", year="1989", runtime=126, imdb_rating=7.5)

    rec = WatchedRecord.from_details(details, 9)

    assert rec.imdb_id == "tt1"
    assert rec.runtime == 126
    assert rec.imdb_rating == 7.5
    assert rec.user_rating == 9


def test_missing_year_survives_a_restart(store, db_path):
    rec = WatchedRecord(imdb_id="tt7", title="Untitled", user_rating=4, year=None)
    store.add(rec)

    assert _fresh_store(db_path).records == (rec,)


def test_unusable_data_dir_degrades_to_memory_only(tmp_path, log_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    store = WatchedListStore(LocalStorage(blocker / "movie_watch.sqlite"))

    store.load_initial()
    assert store.records == ()

    assert store.add(_rec("tt1")) is True
    assert "tt1" in store
    log = log_path.read_text()
    assert "unreadable" in log
    assert "write failed" in log
