"""Topicsheet - ordered Topic → SubTopic → Question tracking."""
