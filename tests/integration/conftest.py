import pytest

from test_app.models import Author, Category, Comment, Post, Tag


@pytest.fixture
def blog(db):
    """Three posts: two by authors, one without; one tagged, one commented."""
    alice = Author.objects.create(name="Alice", email="alice@example.com")
    bob = Author.objects.create(name="Bob", email="bob@example.com")
    news = Category.objects.create(name="News")
    guides = Category.objects.create(name="Guides")
    python = Tag.objects.create(name="python")

    hello = Post.objects.create(
        title="Hello World",
        status="published",
        views=10,
        author=alice,
        category=news,
        reviewer_id=bob.pk,
    )
    hello.tags.add(python)
    tips = Post.objects.create(
        title="Django Tips",
        status="draft",
        views=5,
        author=bob,
        category=guides,
        reviewer_id=alice.pk,
    )
    memoir = Post.objects.create(title="alice", status="published", views=1)
    Comment.objects.create(post=hello, body="First")
    Comment.objects.create(post=hello, body="Second")
    Author.objects.filter(pk=alice.pk).update(featured_post_id=tips.pk)
    Author.objects.filter(pk=bob.pk).update(featured_post_id=hello.pk)

    return {
        "alice": alice,
        "bob": bob,
        "hello": hello,
        "tips": tips,
        "memoir": memoir,
    }
