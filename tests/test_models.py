import pytest
from sqlalchemy.exc import IntegrityError

from videotube.models import Category, Like, Product, Subscription


def test_product_price_and_stock_default_to_zero(session_factory, seed):
    owner = seed.user()
    with session_factory() as db:
        category = Category(name="Cameras")
        db.add(category)
        db.flush()
        product = Product(name="Tripod", description="Three legs", category_id=category.id, owner_id=owner.id)
        db.add(product)
        db.commit()

        assert product.price == 0
        assert product.stock == 0
        assert product.category.name == "Cameras"


def test_product_requires_category(session_factory):
    with session_factory() as db:
        db.add(Product(name="Orphan", description="No category"))
        with pytest.raises(IntegrityError):
            db.commit()


def test_like_is_unique_per_user_and_video(session_factory, seed):
    owner = seed.user()
    video = seed.video(owner)
    seed.like(video, owner)

    with session_factory() as db:
        db.add(Like(video_id=video.id, liked_by_id=owner.id))
        with pytest.raises(IntegrityError):
            db.commit()


def test_subscription_pair_is_unique_and_not_self(session_factory, seed):
    subscriber = seed.user()
    channel = seed.user()
    seed.subscription(subscriber, channel)

    with session_factory() as db:
        db.add(Subscription(subscriber_id=subscriber.id, channel_id=channel.id))
        with pytest.raises(IntegrityError):
            db.commit()

    with session_factory() as db:
        db.add(Subscription(subscriber_id=subscriber.id, channel_id=subscriber.id))
        with pytest.raises(IntegrityError):
            db.commit()
