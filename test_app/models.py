from django.db import models

from rail_filtration.queryset import FilterableManager


class Author(models.Model):
    name = models.CharField(max_length=100)
    email = models.EmailField(blank=True)
    featured_post_id = models.IntegerField(null=True, blank=True)

    class Meta:
        app_label = "test_app"
        db_table = "authors"


class Category(models.Model):
    name = models.CharField(max_length=100)

    class Meta:
        app_label = "test_app"
        db_table = "categories"
        verbose_name_plural = "categories"


class Tag(models.Model):
    name = models.CharField(max_length=50)

    class Meta:
        app_label = "test_app"
        db_table = "tags"


class Post(models.Model):
    title = models.CharField(max_length=200)
    body = models.TextField(blank=True)
    status = models.CharField(max_length=20, default="draft")
    views = models.IntegerField(default=0)
    author = models.ForeignKey(
        Author, on_delete=models.SET_NULL, null=True, blank=True, related_name="posts"
    )
    category = models.ForeignKey(
        Category, on_delete=models.CASCADE, null=True, blank=True, related_name="posts"
    )
    reviewer_id = models.IntegerField(null=True, blank=True)
    tags = models.ManyToManyField(Tag, blank=True, related_name="posts")

    objects = FilterableManager()

    class Meta:
        app_label = "test_app"
        db_table = "posts"

    class FilterMeta:
        searchable = ["title:like", "author.name:like", "status"]
        filters = {"status": "test_app.filters.StatusFilter"}
        filter_bags = ["test_app.filters.PublishingFilters"]


class Comment(models.Model):
    post = models.ForeignKey(Post, on_delete=models.CASCADE, related_name="comments")
    body = models.TextField()

    class Meta:
        app_label = "test_app"
        db_table = "comments"
