"""End-to-end tests for primary credential issuance and completion."""

import json
import threading
from unittest.mock import patch

import pytest
from sympy import isprime

from clcred.config import CredentialConfig
from clcred.exceptions import (
    CredentialVerificationError,
    InvalidAttributeEncoding,
    OperationCancelled,
    PrimeNotFound,
)
from clcred.holder import (
    ClaimRequest,
    Holder,
    build_claim_request,
    complete_credential,
    verify_completed_credential,
)
from clcred.issuer import (
    Issuer,
    PrimaryCredential,
    generate_issuer_keys,
    issue_primary_credential,
    signature_target,
    verify_primary_credential,
)
from clcred.schema import CredentialSchema

ALICE = {"name": "Alice", "age": 28}


@pytest.fixture
def claim(key_pair, master_secret, small_config):
    return build_claim_request(key_pair.public, master_secret, small_config)


class TestIssuePrimaryCredential:
    def test_exponent_in_window_and_prime(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        assert 2**596 <= credential.e < 2**596 + 2**119
        assert isprime(credential.e)

    def test_signature_relation_holds(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        public = key_pair.public
        n = public.n

        rhs = public.z
        rhs = rhs * pow(public.r["name"], credential.encoded_attributes["name"], n) % n
        rhs = rhs * pow(public.r["age"], 28, n) % n
        rhs = rhs * pow(public.s, credential.v_double_prime, n) % n
        rhs = rhs * request.u % n
        assert pow(credential.a, credential.e, n) == rhs
        assert verify_primary_credential(public, credential, request.u, small_config)

    def test_randomizer_size(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        assert credential.v_double_prime.bit_length() == small_config.v_double_prime_bits

    def test_encodings_recorded(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        assert credential.encoded_attributes["age"] == 28
        assert credential.encoded_attributes["name"].bit_length() <= 256

    def test_fresh_randomness_per_issuance(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        first = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        second = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        assert first.v_double_prime != second.v_double_prime

    def test_tampered_credential_fails(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        changed = credential.model_copy(
            update={"encoded_attributes": {**credential.encoded_attributes, "age": 29}}
        )
        assert not verify_primary_credential(key_pair.public, changed, request.u, small_config)

    def test_exponent_outside_window_fails(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        changed = credential.model_copy(update={"e": 65537})
        assert not verify_primary_credential(key_pair.public, changed, request.u, small_config)

    def test_verifiers_use_configured_minimum_rounds(self, key_pair, claim, person_schema):
        request, blinding = claim
        config = CredentialConfig(prime_bits=128, min_primality_rounds=40)
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, config)
        completed = complete_credential(credential, blinding)

        with patch("clcred.issuer.credential.is_probable_prime", return_value=True) as checker:
            verify_primary_credential(key_pair.public, credential, request.u, config)
        assert checker.call_args.args[1] == 40

        with patch("clcred.holder.credential.is_probable_prime", return_value=True) as checker:
            verify_completed_credential(key_pair.public, completed, Holder(config).master_secret, config)
        assert checker.call_args.args[1] == 40

    def test_json_round_trip(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        data = json.loads(credential.to_json())
        assert set(data) == {"a", "e", "v_double_prime", "encoded_attributes"}
        assert PrimaryCredential.from_json(credential.to_json()) == credential


class TestIssuanceFailures:
    def test_unencodable_value_gives_no_credential(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        with patch("clcred.issuer.credential.find_prime_in_range") as search:
            with pytest.raises(InvalidAttributeEncoding) as exc_info:
                issue_primary_credential(
                    key_pair, request, person_schema, {"name": "", "age": 28}, small_config
                )
        assert exc_info.value.attribute == "name"
        search.assert_not_called()

    def test_prime_search_exhausted(self, key_pair, claim, person_schema):
        request, _ = claim
        config = CredentialConfig(prime_bits=128, prime_search_iterations=3)
        with patch("clcred.primitives.search.is_probable_prime", return_value=False):
            with pytest.raises(PrimeNotFound) as exc_info:
                issue_primary_credential(key_pair, request, person_schema, ALICE, config)
        assert exc_info.value.attempts == 3

    @pytest.mark.parametrize("u", [0, -1])
    def test_commitment_out_of_range(self, key_pair, person_schema, small_config, u):
        request = ClaimRequest.model_construct(u=u)
        with pytest.raises(ValueError, match="unit"):
            issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)

    def test_commitment_at_modulus(self, key_pair, person_schema, small_config):
        request = ClaimRequest(u=key_pair.public.n)
        with pytest.raises(ValueError, match="unit"):
            issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)

    def test_commitment_sharing_factor(self, key_pair, person_schema, small_config):
        request = ClaimRequest(u=key_pair.private.p)
        with pytest.raises(ValueError, match="unit"):
            issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)

    def test_schema_not_covered_by_key(self, key_pair, claim, small_config):
        request, _ = claim
        schema = CredentialSchema.from_flags({"name": True, "height": False})
        with pytest.raises(ValueError, match="height"):
            issue_primary_credential(
                key_pair, request, schema, {"name": "Alice", "height": 175}, small_config
            )

    def test_cancelled(self, key_pair, claim, person_schema, small_config):
        request, _ = claim
        cancel = threading.Event()
        cancel.set()
        with pytest.raises(OperationCancelled):
            issue_primary_credential(
                key_pair, request, person_schema, ALICE, small_config, cancel=cancel
            )


class TestCompletion:
    def test_completed_credential_verifies(self, key_pair, claim, master_secret, person_schema, small_config):
        request, blinding = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        completed = complete_credential(credential, blinding)
        assert completed.v == credential.v_double_prime + blinding.v_prime
        assert verify_completed_credential(key_pair.public, completed, master_secret, small_config)

    def test_wrong_master_secret_fails(self, key_pair, claim, person_schema, small_config):
        request, blinding = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        completed = complete_credential(credential, blinding)
        other = Holder(small_config).master_secret
        assert not verify_completed_credential(key_pair.public, completed, other, small_config)

    def test_target_without_commitment_matches_completed(self, key_pair, claim, master_secret, person_schema, small_config):
        request, blinding = claim
        credential = issue_primary_credential(key_pair, request, person_schema, ALICE, small_config)
        public = key_pair.public
        full = signature_target(
            public,
            credential.encoded_attributes,
            credential.v_double_prime + blinding.v_prime,
            pow(public.rms, master_secret.value, public.n),
        )
        assert pow(credential.a, credential.e, public.n) == full


class TestEndToEnd:
    def test_issuer_and_holder_round_trip(self, small_config, person_schema, key_pair):
        issuer = Issuer(person_schema, config=small_config, key_pair=key_pair)
        holder = Holder(small_config)

        request = holder.request_credential(issuer.public_key)
        assert 0 <= request.u < issuer.public_key.n
        assert holder.pending_requests == 1

        wire_request = ClaimRequest.from_json(request.to_json())
        credential = issuer.issue(wire_request, ALICE)
        completed = holder.store_credential(request, PrimaryCredential.from_json(credential.to_json()))

        assert holder.pending_requests == 0
        assert completed.encoded_attributes["age"] == 28
        assert verify_completed_credential(
            issuer.public_key, completed, holder.master_secret, small_config
        )

    def test_distinct_holders_distinct_requests(self, small_config, key_pair):
        first = Holder(small_config).request_credential(key_pair.public)
        second = Holder(small_config).request_credential(key_pair.public)
        assert first.u != second.u

    def test_store_rejects_credential_for_other_request(self, small_config, person_schema, key_pair):
        issuer = Issuer(person_schema, config=small_config, key_pair=key_pair)
        holder = Holder(small_config)
        request = holder.request_credential(issuer.public_key)
        other_request = holder.request_credential(issuer.public_key)

        credential = issuer.issue(other_request, ALICE)
        with pytest.raises(CredentialVerificationError):
            holder.store_credential(request, credential)
        assert holder.pending_requests == 2

    def test_store_unknown_request(self, small_config, person_schema, key_pair):
        issuer = Issuer(person_schema, config=small_config, key_pair=key_pair)
        request = Holder(small_config).request_credential(issuer.public_key)
        credential = issuer.issue(request, ALICE)
        with pytest.raises(KeyError):
            Holder(small_config).store_credential(request, credential)

    def test_tiny_supplied_key_round_trip(self):
        config = CredentialConfig(prime_bits=16)
        schema = CredentialSchema.from_flags({"age": False})
        key_pair = generate_issuer_keys(schema.attribute_names, config=config, primes=(11, 23))
        issuer = Issuer(schema, config=config, key_pair=key_pair)
        holder = Holder(config)

        request = holder.request_credential(issuer.public_key)
        completed = holder.store_credential(request, issuer.issue(request, {"age": 41}))
        assert completed.encoded_attributes == {"age": 41}


class TestIssuerService:
    def test_generates_key_covering_schema(self, small_config, person_schema):
        issuer = Issuer(person_schema, config=small_config)
        assert issuer.public_key.attribute_names == person_schema.attribute_names
        assert issuer.epoch == 1

    def test_rejects_key_without_schema_bases(self, small_config, key_pair):
        schema = CredentialSchema.from_flags({"height": False})
        with pytest.raises(ValueError, match="height"):
            Issuer(schema, config=small_config, key_pair=key_pair)

    def test_rotation_changes_key(self, small_config, person_schema, key_pair):
        issuer = Issuer(person_schema, config=small_config, key_pair=key_pair)
        new_key = issuer.rotate_keys()
        assert issuer.epoch == 2
        assert new_key.n != key_pair.public.n
        assert issuer.public_key is new_key

    def test_concurrent_issuance(self, small_config, person_schema, key_pair):
        issuer = Issuer(person_schema, config=small_config, key_pair=key_pair)
        holders = [Holder(small_config) for _ in range(4)]
        requests = [h.request_credential(issuer.public_key) for h in holders]
        results: list = [None] * len(requests)

        def worker(index: int) -> None:
            results[index] = issuer.issue(requests[index], ALICE)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(len(requests))]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        for holder, request, credential in zip(holders, requests, results):
            holder.store_credential(request, credential)
