from chain_events.models.kinds import EventKind
from chain_events.query.filters import AnyOf, ContainsAny, Equals, build_predicate
from chain_events.query.params import normalize


def _predicate(kind, **params):
    q = normalize(kind, params)
    return build_predicate(kind, q.filters)


def test_no_filters_matches_everything():
    p = _predicate(EventKind.NFT_MINT)
    assert p.matches_all
    assert p.describe() == "nft_mint: *"


def test_nft_mint_filters_map_to_columns():
    p = _predicate(EventKind.NFT_MINT, token_account_id="nft.near", account_id="alice.near")
    assert p.conditions == (
        Equals("contract_id", "nft.near"),
        Equals("owner_id", "alice.near"),
    )


def test_trade_filters_map_to_trader_and_pool():
    p = _predicate(EventKind.TRADE_POOL, pool_id="REF-3", account_id="t.near")
    assert p.conditions == (Equals("pool", "REF-3"), Equals("trader", "t.near"))


def test_involved_accounts_supersede_owner_filters():
    p = _predicate(
        EventKind.NFT_TRANSFER,
        token_account_id="nft.near",
        old_owner_id="carol.near",
        new_owner_id="dave.near",
        involved_account_ids="alice.near,bob.near",
    )
    assert p.conditions == (
        Equals("contract_id", "nft.near"),
        AnyOf(("old_owner_id", "new_owner_id"), frozenset({"alice.near", "bob.near"})),
    )


def test_owner_filters_apply_without_involved_accounts():
    p = _predicate(EventKind.NFT_TRANSFER, old_owner_id="carol.near", involved_account_ids=",")
    assert p.conditions == (Equals("old_owner_id", "carol.near"),)


def test_swap_tokens_use_set_membership():
    p = _predicate(EventKind.TRADE_SWAP, involved_token_account_ids="wrap.near,usdt.near")
    assert p.conditions == (
        ContainsAny("involved_tokens", "token_account_id", frozenset({"wrap.near", "usdt.near"})),
    )


def test_potlock_referrer_filter():
    p = _predicate(EventKind.POTLOCK_POT_DONATION, pot_id="pot.near", referrer_id="ref.near")
    assert p.conditions == (Equals("pot_id", "pot.near"), Equals("referrer_id", "ref.near"))


def test_clause_renders_sql(db_engine):
    from chain_events.data.tables import NftTransferTbl

    p = _predicate(EventKind.NFT_TRANSFER, involved_account_ids="a.near")
    sql = str(p.clause(NftTransferTbl).compile(db_engine))
    assert "old_owner_id IN" in sql
    assert "new_owner_id IN" in sql
    assert " OR " in sql
