# Flat fee per 3-hour demo slot and its fixed two-party split (dollars)
DEMO_FEE = 30
MARKET_PER_DEMO = 20
GRASSROOTS_PER_DEMO = 10

DEMO_FEE_CENTS = DEMO_FEE * 100
CURRENCY = "usd"


def cart_total_cents(slot_count: int) -> int:
    return slot_count * DEMO_FEE_CENTS


def revenue_split(demos: int) -> dict:
    return {
        "revenue": demos * DEMO_FEE,
        "marketShare": demos * MARKET_PER_DEMO,
        "grassrootsShare": demos * GRASSROOTS_PER_DEMO,
    }
