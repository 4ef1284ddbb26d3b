"""
Tests for the JSON-file share store.
"""
import asyncio
import json
import os
import stat
from datetime import datetime, timedelta, timezone

import pytest

from portal_wallet.models import Curve, StorageError
from portal_wallet.share_store import ShareStore


class TestOpen:
    """Tests for store initialization."""

    async def test_creates_missing_file(self, tmp_path):
        """Should create the file and parent directory with an empty collection."""
        path = tmp_path / "nested" / "db.json"
        store = ShareStore(path)

        await store.open()

        assert json.loads(path.read_text()) == {"signingShares": []}

    async def test_keeps_existing_records(self, tmp_path):
        """Should not truncate an existing store."""
        path = tmp_path / "db.json"
        first = ShareStore(path)
        await first.open()
        await first.append("cl_1", Curve.ED25519, "blob")

        reopened = ShareStore(path)
        await reopened.open()

        assert len(await reopened.list_for_client("cl_1")) == 1

    async def test_rejects_invalid_json(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text("{not json")

        with pytest.raises(StorageError, match="not valid JSON"):
            await ShareStore(path).open()

    async def test_rejects_unexpected_layout(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"signingShares": {"id": "1"}}))

        with pytest.raises(StorageError, match="unexpected layout"):
            await ShareStore(path).open()

    @pytest.mark.skipif(os.name != "posix", reason="POSIX permissions only")
    async def test_file_is_owner_only(self, share_store):
        mode = stat.S_IMODE(share_store.path.stat().st_mode)
        assert mode == 0o600


class TestAppend:
    """Tests for persisting shares."""

    async def test_append_returns_record(self, share_store):
        """Should return the persisted record with an id and UTC timestamp."""
        record = await share_store.append("cl_1", Curve.SECP256K1, "secp-blob")

        assert record.id.isdigit()
        assert record.client_id == "cl_1"
        assert record.curve == Curve.SECP256K1
        assert record.share == "secp-blob"
        assert record.created_at.tzinfo is not None

    async def test_append_is_durable(self, share_store):
        """Should be visible in the file as soon as append returns."""
        record = await share_store.append("cl_1", "ED25519", "ed-blob")

        rows = json.loads(share_store.path.read_text())["signingShares"]
        assert rows == [
            {
                "id": record.id,
                "clientId": "cl_1",
                "curve": "ED25519",
                "share": "ed-blob",
                "createdAt": record.to_dict()["createdAt"],
            }
        ]
        assert rows[0]["createdAt"].endswith("Z")

    async def test_ids_strictly_increase(self, share_store):
        """Should issue increasing ids even for back-to-back appends."""
        records = [
            await share_store.append("cl_1", Curve.ED25519, f"blob-{i}") for i in range(5)
        ]

        ids = [int(record.id) for record in records]
        assert ids == sorted(ids)
        assert len(set(ids)) == len(ids)

    async def test_rejects_unknown_curve(self, share_store):
        with pytest.raises(ValueError):
            await share_store.append("cl_1", "P256", "blob")

    async def test_no_temp_file_left_behind(self, share_store):
        await share_store.append("cl_1", Curve.ED25519, "blob")
        assert list(share_store.path.parent.glob("*.tmp")) == []

    async def test_concurrent_appends_for_distinct_clients(self, share_store):
        """Should keep every record when appends for different clients overlap."""
        client_ids = [f"cl_{i}" for i in range(20)]

        records = await asyncio.gather(
            *(
                share_store.append(client_id, Curve.ED25519, f"share-{client_id}")
                for client_id in client_ids
            )
        )

        assert len({record.id for record in records}) == len(client_ids)
        for client_id in client_ids:
            latest = await share_store.latest_for(client_id, Curve.ED25519)
            assert latest.share == f"share-{client_id}"
        rows = json.loads(share_store.path.read_text())["signingShares"]
        assert len(rows) == len(client_ids)
        assert list(share_store.path.parent.glob("*.tmp")) == []

    async def test_concurrent_provisioning_writes_both_curves(self, share_store):
        """Should keep both curves for two clients written at the same time."""
        await asyncio.gather(
            share_store.append("cl_a", Curve.ED25519, "a-ed"),
            share_store.append("cl_b", Curve.ED25519, "b-ed"),
            share_store.append("cl_a", Curve.SECP256K1, "a-secp"),
            share_store.append("cl_b", Curve.SECP256K1, "b-secp"),
        )

        for client_id in ("cl_a", "cl_b"):
            shares = await share_store.list_for_client(client_id)
            assert sorted(share.share for share in shares) == [
                f"{client_id[-1]}-ed",
                f"{client_id[-1]}-secp",
            ]


class TestLookup:
    """Tests for share lookups."""

    async def test_list_for_client_filters(self, share_store):
        await share_store.append("cl_1", Curve.ED25519, "a")
        await share_store.append("cl_2", Curve.ED25519, "b")
        await share_store.append("cl_1", Curve.SECP256K1, "c")

        shares = await share_store.list_for_client("cl_1")

        assert [share.share for share in shares] == ["a", "c"]

    async def test_get_by_id(self, share_store):
        record = await share_store.append("cl_1", Curve.ED25519, "a")

        assert (await share_store.get(record.id)).share == "a"
        assert await share_store.get("missing") is None

    async def test_latest_for_returns_none_when_absent(self, share_store):
        await share_store.append("cl_1", Curve.ED25519, "a")

        assert await share_store.latest_for("cl_1", Curve.SECP256K1) is None
        assert await share_store.latest_for("cl_2", Curve.ED25519) is None

    async def test_latest_for_prefers_newest(self, share_store):
        """Should pick the most recently created share for a (client, curve)."""
        await share_store.append("cl_1", Curve.SECP256K1, "old")
        await share_store.append("cl_1", Curve.ED25519, "ed")
        await share_store.append("cl_1", Curve.SECP256K1, "new")

        latest = await share_store.latest_for("cl_1", "SECP256K1")

        assert latest.share == "new"

    async def test_latest_for_orders_by_timestamp(self, tmp_path):
        """Should order by createdAt, not by position in the file."""
        now = datetime.now(timezone.utc)
        path = tmp_path / "db.json"
        path.write_text(
            json.dumps(
                {
                    "signingShares": [
                        {
                            "id": "2",
                            "clientId": "cl_1",
                            "curve": "ED25519",
                            "share": "newer",
                            "createdAt": now.isoformat(),
                        },
                        {
                            "id": "3",
                            "clientId": "cl_1",
                            "curve": "ED25519",
                            "share": "older",
                            "createdAt": (now - timedelta(days=1)).isoformat(),
                        },
                    ]
                }
            )
        )
        store = ShareStore(path)
        await store.open()

        latest = await store.latest_for("cl_1", Curve.ED25519)

        assert latest.share == "newer"

    async def test_corrupt_record_raises_storage_error(self, tmp_path):
        path = tmp_path / "db.json"
        path.write_text(json.dumps({"signingShares": [{"id": "1", "clientId": "cl_1"}]}))
        store = ShareStore(path)

        with pytest.raises(StorageError, match="Corrupt share record"):
            await store.list_for_client("cl_1")

    async def test_repeated_reads_are_identical(self, share_store):
        await share_store.append("cl_1", Curve.ED25519, "a")
        await share_store.append("cl_1", Curve.SECP256K1, "b")

        first = await share_store.list_for_client("cl_1")
        second = await share_store.list_for_client("cl_1")

        assert first == second
        assert {share.curve for share in first} == {"ED25519", "SECP256K1"}

    async def test_reads_see_external_writes(self, share_store):
        """Should reload the file on every read."""
        other = ShareStore(share_store.path)
        await other.append("cl_1", Curve.ED25519, "from-other")

        latest = await share_store.latest_for("cl_1", Curve.ED25519)

        assert latest.share == "from-other"
