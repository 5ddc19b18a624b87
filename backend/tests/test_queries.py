from conftest import create_listing, my_listing_ids


def test_browse_hides_reserved_listings(seller, buyer, listing_id):
    assert [l["id"] for l in buyer.get("/api/listings").json()] == [listing_id]

    buyer.post("/api/listings/reserve", json={"listingId": listing_id})
    assert buyer.get("/api/listings").json() == []


def test_browse_is_public_and_enriched(seller, client, listing_id):
    [row] = client.get("/api/listings").json()
    assert row["sellerName"] == "Sam Seller"
    assert row["sellerEmail"] == "s@students.towson.edu"
    assert row["averageRating"] is None
    assert row["reviewCount"] == 0
    assert row["image"] is None
    assert row["contactInfo"] == "text 555-1234"


def test_browse_search_matches_title_or_description(seller, client):
    create_listing(seller, title="Mini Fridge", description="Cold and compact")
    create_listing(seller, title="Chemistry Textbook", description="Barely opened")
    create_listing(seller, title="Rug", description="Fits a 100% standard dorm")

    def titles(search):
        resp = client.get("/api/listings", params={"search": search})
        assert resp.status_code == 200
        return sorted(l["title"] for l in resp.json())

    assert titles("") == ["Chemistry Textbook", "Mini Fridge", "Rug"]
    assert titles("fridge") == ["Mini Fridge"]
    assert titles("BARELY") == ["Chemistry Textbook"]
    assert titles("100%") == ["Rug"]
    # literal match, not a wildcard
    assert titles("%") == ["Rug"]
    assert titles("_") == []


def test_browse_includes_seller_rating(seller, buyer, listing_id):
    buyer.post(
        "/api/user/reviews",
        json={"transactionId": "TX1", "sellerEmail": "s@students.towson.edu", "rating": 4},
    )
    [row] = buyer.get("/api/listings").json()
    assert row["averageRating"] == 4.0
    assert row["reviewCount"] == 1


def test_cart_shows_seller_payment_handles(seller, buyer, listing_id):
    buyer.post("/api/listings/reserve", json={"listingId": listing_id})

    [item] = buyer.get("/api/user/cart").json()
    assert item["paymentStatus"] == "unpaid"
    assert item["transactionId"] is None
    assert item["seller"] == {"name": "Sam Seller", "cashApp": "$samsells", "venmo": "Not provided"}


def test_my_listings_include_every_state(seller, buyer, listing_id):
    create_listing(seller, title="Second")
    buyer.post("/api/listings/reserve", json={"listingId": listing_id})

    listings = {l["id"]: l for l in seller.get("/api/user/listings").json()}
    assert len(listings) == 2
    assert listings[listing_id]["reserved"] is True
    assert listings[listing_id]["reservedBy"] == "b@students.towson.edu"
    assert listings[listing_id]["sellerEmail"] == "s@students.towson.edu"
    assert len(my_listing_ids(buyer)) == 0


def test_histories_start_empty(buyer):
    assert buyer.get("/api/user/orderHistory").json() == []
    assert buyer.get("/api/user/paymentHistory").json() == []
