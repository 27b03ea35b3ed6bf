"""Unit tests for the DID discovery request/response schemas."""

from snap_state.discovery.schemas import (
    DidDiscoverMatch,
    DidDiscoveryProviderResult,
    DiscoverDidArgs,
    DiscoverDidResult,
)


def test_args_options_optional():
    args = DiscoverDidArgs(query="alice")
    assert args.options is None


def test_match_reads_wire_field_names():
    match = DidDiscoverMatch.model_validate({"did": "did:example:1", "metaData": {"alias": "alice"}})
    assert match.meta_data == {"alias": "alice"}


def test_partial_failure_keeps_other_results():
    result = DiscoverDidResult(
        query="alice",
        results=[
            DidDiscoveryProviderResult(
                provider="aliases",
                matches=[DidDiscoverMatch(did="did:example:1", meta_data={"alias": "alice"})],
            )
        ],
    )

    result.add_error("ens", "resolver timeout")

    wire = result.to_wire()
    assert wire["errors"] == {"ens": "resolver timeout"}
    assert wire["results"][0]["matches"][0] == {"did": "did:example:1", "metaData": {"alias": "alice"}}
    assert "options" not in wire


def test_result_without_errors_omits_key():
    result = DiscoverDidResult(results=[])
    assert "errors" not in result.to_wire()
