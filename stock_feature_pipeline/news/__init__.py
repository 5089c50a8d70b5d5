"""News text preparation for the sentiment classifiers."""

from .daily_news import explode_news, build_article_frame, build_daily_news_text

__all__ = ['explode_news', 'build_article_frame', 'build_daily_news_text']
