from django.apps import AppConfig


class BlogAppConfig(AppConfig):
    name = "tests.blog_app"
    label = "blog_app"
