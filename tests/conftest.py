"""Pytest configuration and fixtures for TCG Trends tests."""

import pytest

from catalog.store import CatalogStore
from database.connection import get_memory_connection
from database.schema import initialize_database


@pytest.fixture
def catalog_db():
    """Create in-memory DuckDB seeded with a small catalog.

    Category 3 cards, sorted by daily change (desc, NULLs excluded):
        7 Pikachu (Promo)   +33.3%
        1 Pikachu           +25%
        2 Charizard ex      +20%
        8 Lucario           +5%
        3 Mew ex            0%
        5 Eevee             -16.7%
    Gardevoir (4) has no previous price, so no change.
    """
    conn = get_memory_connection()
    initialize_database(conn)

    conn.execute("""
        INSERT INTO product_groups (group_id, name, abbreviation, category_id, published_on) VALUES
        (100, 'Scarlet & Violet', 'SVI', 3, '2023-03-31'),
        (101, 'Paldea Evolved', 'PAL', 3, '2023-06-09'),
        (102, 'Base Set', 'BS', 3, '1999-01-09'),
        (200, 'Dominaria', 'DOM', 1, '2018-04-27'),
        (300, 'Romance Dawn', 'OP01', 68, '2022-12-02')
    """)

    conn.execute("""
        INSERT INTO products (
            id, product_id, name, clean_name, sub_type_name, product_type, rarity,
            group_id, image_url, url, market_price, prev_market_price,
            diff_market_price, dollar_diff_market_price, updated_at
        ) VALUES
        (1, 5001, 'Pikachu', 'Pikachu', 'Normal', 'card', 'Common', 100, 'https://img/1.jpg', 'https://shop/1', 1.00, 0.80, 0.25, 0.20, '2024-05-01 06:00:00'),
        (2, 5002, 'Charizard ex', 'Charizard ex', 'Holofoil', 'card', 'Special Illustration Rare', 101, 'https://img/2.jpg', 'https://shop/2', 120.00, 100.00, 0.20, 20.00, '2024-05-01 06:00:00'),
        (3, 5003, 'Mew ex', 'Mew ex', 'Holofoil', 'card', 'Ultra Rare', 101, 'https://img/3.jpg', 'https://shop/3', 15.00, 15.00, 0.0, 0.00, '2024-05-01 06:00:00'),
        (4, 5004, 'Gardevoir', 'Gardevoir', 'Holofoil', 'card', 'Rare', 100, 'https://img/4.jpg', 'https://shop/4', 7.50, NULL, NULL, NULL, '2024-05-01 06:00:00'),
        (5, 5005, 'Eevee', 'Eevee', 'Normal', 'card', 'Uncommon', 102, 'https://img/5.jpg', 'https://shop/5', 4.99, 5.99, -0.166945, -1.00, '2024-05-01 06:00:00'),
        (6, 5006, 'Scarlet & Violet Booster Box', 'Scarlet Violet Booster Box', NULL, 'sealed', NULL, 100, 'https://img/6.jpg', 'https://shop/6', 140.00, 130.00, 0.076923, 10.00, '2024-05-01 06:00:00'),
        (7, 5007, 'Pikachu (Promo)', 'Pikachu Promo', 'Holofoil', 'card', 'Promo', 102, 'https://img/7.jpg', 'https://shop/7', 20.00, 15.00, 0.333333, 5.00, '2024-05-01 06:00:00'),
        (8, 5008, 'Lucario', 'Lucario', 'Normal', 'card', '', 101, 'https://img/8.jpg', 'https://shop/8', 2.10, 2.00, 0.05, 0.10, '2024-05-01 06:00:00'),
        (9, 6001, 'Llanowar Elves', 'Llanowar Elves', 'Normal', 'card', 'Common', 200, 'https://img/9.jpg', 'https://shop/9', 0.25, 0.20, 0.25, 0.05, '2024-05-01 06:00:00'),
        (10, 6002, 'Dominaria Booster Box', 'Dominaria Booster Box', NULL, 'sealed', NULL, 200, 'https://img/10.jpg', 'https://shop/10', 95.00, 100.00, -0.05, -5.00, '2024-05-01 06:00:00'),
        (11, 7001, 'Monkey.D.Luffy', 'MonkeyDLuffy', 'Normal', 'card', 'Leader', 300, 'https://img/11.jpg', 'https://shop/11', 3.00, 2.50, 0.20, 0.50, '2024-05-01 06:00:00')
    """)

    yield conn
    conn.close()


@pytest.fixture
def catalog_store(catalog_db):
    """Catalog store over the seeded database."""
    return CatalogStore(catalog_db)
