from django.http import JsonResponse
from django.views.generic import ListView

from rail_filtration.views import FiltrationMixin

from .filters import MinViewsFilter, TagFilter
from .models import Post


class PostListView(FiltrationMixin, ListView):
    model = Post
    filters = {"tag": TagFilter, "min_views": MinViewsFilter}

    def render_to_response(self, context, **response_kwargs):
        posts = [
            {"id": post.pk, "title": post.title, "status": post.status}
            for post in context["object_list"]
        ]
        return JsonResponse({"results": posts}, **response_kwargs)
