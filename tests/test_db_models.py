"""
Tests for the database models.

These tests verify that:
1. Models have correct table names and columns
2. to_dict() methods return proper structures
3. Chain-sized integers survive a round trip through the database
"""

from sqlalchemy import inspect

from artwork_indexer.db.models import AccountModel, ArtworkModel, BidLogModel


class TestArtworkModel:
    """Tests for ArtworkModel."""

    def test_table_name(self):
        assert ArtworkModel.__tablename__ == "artworks"

    def test_has_required_columns(self):
        mapper = inspect(ArtworkModel)
        column_names = {col.key for col in mapper.columns}

        required = {
            "id", "token_id", "creator_id", "owner_id", "creation_date",
            "modified", "removed", "burned", "for_sale", "broken",
            "metadata_uri", "metadata_hash", "name", "description",
            "media_uri", "media_hash", "mime_type", "size", "tags",
            "tags_string", "current_bid_id",
        }
        assert required.issubset(column_names), f"Missing columns: {required - column_names}"

    def test_to_dict_structure(self):
        model = ArtworkModel(
            id="9",
            token_id=9,
            creator_id="0xaa",
            owner_id="0xbb",
            creation_date=100,
            burned=False,
            for_sale=True,
            broken=False,
            tags=["x", "y"],
            tags_string="x y",
            current_bid_id="9-0xbb-120",
        )

        result = model.to_dict()
        assert result["creator"] == "0xaa"
        assert result["owner"] == "0xbb"
        assert result["for_sale"] is True
        assert result["tags"] == ["x", "y"]
        assert result["current_bid"] == "9-0xbb-120"
        assert result["removed"] is None


class TestBidLogModel:
    """Tests for BidLogModel."""

    def test_to_dict_structure(self):
        model = BidLogModel(
            id="1-0xbb-5",
            amount=10,
            bidder_id="0xbb",
            item_id="1",
            timestamp=5,
            accepted=False,
            canceled=True,
        )

        assert model.to_dict() == {
            "id": "1-0xbb-5",
            "amount": 10,
            "bidder": "0xbb",
            "item": "1",
            "timestamp": 5,
            "accepted": False,
            "canceled": True,
        }


class TestUInt256:
    """Round trips through the UInt256 column type."""

    def test_large_values_round_trip(self, db_session):
        amount = 2**255 + 12345
        db_session.add(AccountModel(id="0xbb"))
        db_session.add(
            ArtworkModel(
                id="1",
                token_id=2**128,
                creator_id="0xbb",
                owner_id="0xbb",
                creation_date=1700000000,
                burned=False,
                for_sale=False,
                broken=False,
            )
        )
        db_session.add(
            BidLogModel(
                id="b1",
                amount=amount,
                bidder_id="0xbb",
                item_id="1",
                timestamp=1700000001,
                accepted=False,
                canceled=False,
            )
        )
        db_session.commit()
        db_session.expire_all()

        bid = db_session.get(BidLogModel, "b1")
        artwork = db_session.get(ArtworkModel, "1")
        assert bid.amount == amount
        assert isinstance(bid.amount, int)
        assert artwork.token_id == 2**128
        assert artwork.size is None
