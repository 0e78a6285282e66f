import sqlite3
from collections.abc import Generator
from pathlib import Path

import pytest

PLACES_SCHEMA = """
CREATE TABLE moz_origins (
    id INTEGER PRIMARY KEY,
    prefix TEXT NOT NULL,
    host TEXT NOT NULL,
    frecency INTEGER NOT NULL,
    UNIQUE (prefix, host)
);
CREATE TABLE moz_places (
    id INTEGER PRIMARY KEY,
    url LONGVARCHAR,
    title LONGVARCHAR,
    rev_host LONGVARCHAR,
    visit_count INTEGER DEFAULT 0,
    hidden INTEGER DEFAULT 0 NOT NULL,
    typed INTEGER DEFAULT 0 NOT NULL,
    frecency INTEGER DEFAULT -1 NOT NULL,
    last_visit_date INTEGER,
    guid TEXT,
    foreign_count INTEGER DEFAULT 0 NOT NULL,
    url_hash INTEGER DEFAULT 0 NOT NULL,
    description TEXT,
    preview_image_url TEXT,
    origin_id INTEGER REFERENCES moz_origins(id)
);
CREATE TABLE moz_historyvisits (
    id INTEGER PRIMARY KEY,
    from_visit INTEGER,
    place_id INTEGER,
    visit_date INTEGER,
    visit_type INTEGER,
    session INTEGER
);
CREATE TABLE moz_bookmarks (
    id INTEGER PRIMARY KEY,
    type INTEGER,
    fk INTEGER DEFAULT NULL,
    parent INTEGER,
    position INTEGER,
    title LONGVARCHAR,
    keyword_id INTEGER,
    folder_type TEXT,
    dateAdded INTEGER,
    lastModified INTEGER,
    guid TEXT
);
CREATE TABLE moz_keywords (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    keyword TEXT UNIQUE,
    place_id INTEGER,
    post_data TEXT
);
CREATE TABLE moz_anno_attributes (id INTEGER PRIMARY KEY, name VARCHAR(32) UNIQUE NOT NULL);
CREATE TABLE moz_annos (
    id INTEGER PRIMARY KEY,
    place_id INTEGER NOT NULL,
    anno_attribute_id INTEGER,
    content LONGVARCHAR
);
CREATE TABLE moz_items_annos (
    id INTEGER PRIMARY KEY,
    item_id INTEGER NOT NULL,
    anno_attribute_id INTEGER,
    content LONGVARCHAR
);
CREATE TABLE moz_inputhistory (
    place_id INTEGER NOT NULL,
    input LONGVARCHAR NOT NULL,
    use_count INTEGER,
    PRIMARY KEY (place_id, input)
);
CREATE TABLE moz_bookmarks_deleted (guid TEXT PRIMARY KEY, dateRemoved INTEGER NOT NULL DEFAULT 0);
"""

PLACES_ROWS = """
INSERT INTO moz_origins VALUES (1, 'https://', 'example.com', 120);
INSERT INTO moz_origins VALUES (2, 'https://', 'news.example.org', 80);
INSERT INTO moz_places VALUES
    (1, 'https://example.com/', 'Example Domain', 'moc.elpmaxe.', 14, 0, 1, 2000,
     1700000000000000, 'guidAAAAAAAA', 1, 47356399487123, NULL, NULL, 1);
INSERT INTO moz_places VALUES
    (2, 'https://news.example.org/today', 'Today''s news', 'gro.elpmaxe.swen.', 3, 0, 0, 150,
     1700000500000000, 'guidBBBBBBBB', 0, 125508610917256, 'Headlines', 'https://news.example.org/og.png', 2);
INSERT INTO moz_places VALUES
    (3, 'https://example.com/private', NULL, 'moc.elpmaxe.', 1, 0, 0, 100,
     1700000900000000, 'guidCCCCCCCC', 0, 47359837492211, NULL, NULL, 1);
INSERT INTO moz_historyvisits VALUES (1, 0, 1, 1700000000000000, 1, 0);
INSERT INTO moz_historyvisits VALUES (2, 1, 2, 1700000500000000, 1, 0);
INSERT INTO moz_bookmarks VALUES
    (1, 2, NULL, 0, 0, '', NULL, NULL, 1690000000000000, 1690000000000000, 'root________');
INSERT INTO moz_bookmarks VALUES
    (2, 1, 1, 1, 0, 'Example Domain', NULL, NULL, 1690000000000000, 1690000000000000, 'bookmarkAAAA');
INSERT INTO moz_bookmarks VALUES
    (3, 1, 2, 1, 1, NULL, NULL, NULL, 1690000000000000, 1690000000000000, 'bookmarkBBBB');
INSERT INTO moz_keywords (keyword, place_id, post_data) VALUES ('ex', 1, NULL);
INSERT INTO moz_anno_attributes VALUES (1, 'bookmarkProperties/description');
INSERT INTO moz_annos VALUES (1, 2, 1, 'saved page note');
INSERT INTO moz_items_annos VALUES (1, 2, 1, 'bookmark note');
INSERT INTO moz_inputhistory VALUES (1, 'exa', 3);
INSERT INTO moz_bookmarks_deleted VALUES ('deletedAAAAA', 1695000000000000);
"""


def create_places_db(path: Path) -> Path:
    """Write a small database shaped like a Firefox places.sqlite."""
    conn = sqlite3.connect(path)
    try:
        conn.executescript(PLACES_SCHEMA + PLACES_ROWS)
    finally:
        conn.close()
    return path


@pytest.fixture()
def places_db(tmp_path: Path) -> Path:
    """A Firefox-shaped places database on disk."""
    source_dir = tmp_path / "profile"
    source_dir.mkdir()
    return create_places_db(source_dir / "places.sqlite")


@pytest.fixture()
def memory_conn() -> Generator[sqlite3.Connection, None, None]:
    """An empty in-memory database, closed after the test."""
    conn = sqlite3.connect(":memory:")
    try:
        yield conn
    finally:
        conn.close()


LEGACY_PLACES_SCHEMA = """
CREATE TABLE moz_places (
    id INTEGER PRIMARY KEY,
    url LONGVARCHAR,
    title LONGVARCHAR,
    rev_host LONGVARCHAR,
    visit_count INTEGER DEFAULT 0,
    frecency INTEGER DEFAULT -1 NOT NULL,
    guid TEXT,
    url_hash INTEGER DEFAULT 0 NOT NULL
);
CREATE TABLE moz_hosts (
    id INTEGER PRIMARY KEY,
    host TEXT NOT NULL UNIQUE,
    frecency INTEGER,
    typed INTEGER NOT NULL DEFAULT 0,
    prefix TEXT
);
CREATE TABLE moz_bookmarks (id INTEGER PRIMARY KEY, type INTEGER, fk INTEGER, title LONGVARCHAR);
CREATE TABLE moz_keywords (id INTEGER PRIMARY KEY AUTOINCREMENT, keyword TEXT UNIQUE, place_id INTEGER);
CREATE TABLE moz_annos (id INTEGER PRIMARY KEY, place_id INTEGER NOT NULL, content LONGVARCHAR);
CREATE TABLE moz_items_annos (id INTEGER PRIMARY KEY, item_id INTEGER NOT NULL, content LONGVARCHAR);
CREATE TABLE moz_inputhistory (
    place_id INTEGER NOT NULL,
    input LONGVARCHAR NOT NULL,
    use_count INTEGER,
    PRIMARY KEY (place_id, input)
);
INSERT INTO moz_places VALUES (1, 'http://old.example.net/', 'Old Site', 'ten.elpmaxe.dlo.', 4, 90, 'guidLEGACY01', 9911);
INSERT INTO moz_hosts VALUES (1, 'old.example.net', 90, 1, 'http://');
INSERT INTO moz_bookmarks VALUES (1, 1, 1, 'Old Site');
INSERT INTO moz_keywords (keyword, place_id) VALUES ('old', 1);
INSERT INTO moz_annos VALUES (1, 1, 'note');
INSERT INTO moz_inputhistory VALUES (1, 'old', 2);
"""


@pytest.fixture()
def legacy_places_db(tmp_path: Path) -> Path:
    """A places database shaped like one written before Firefox 62."""
    source_dir = tmp_path / "legacy_profile"
    source_dir.mkdir()
    path = source_dir / "places.sqlite"
    conn = sqlite3.connect(path)
    try:
        conn.executescript(LEGACY_PLACES_SCHEMA)
    finally:
        conn.close()
    return path
