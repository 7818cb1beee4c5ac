from townsquare.client.errors import FeedClientError, FetchError
from townsquare.client.feed_aggregator import FeedAggregator, FeedState, PageFetcher, merge_unique
from townsquare.client.http_fetcher import HttpFeedClient
from townsquare.client.models import CommunityTab, CurrentUser, FeedItem

__all__ = [
    "CommunityTab",
    "CurrentUser",
    "FeedAggregator",
    "FeedClientError",
    "FeedItem",
    "FeedState",
    "FetchError",
    "HttpFeedClient",
    "PageFetcher",
    "merge_unique",
]
