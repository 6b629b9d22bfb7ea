"""Unit tests for the fetch queue."""

from link_metadata.fetch_queue import EnqueueResult, FetchQueue


class TestFetchQueue:
    """Tests for FetchQueue."""

    def test_enqueue_new_url(self):
        queue = FetchQueue()

        assert queue.enqueue("https://a.example", 1) is EnqueueResult.NEWLY_QUEUED
        assert queue.has("https://a.example")
        assert queue.size() == 1

    def test_enqueue_existing_url_overwrites_note(self):
        """Last writer wins for the note id."""
        queue = FetchQueue()
        queue.enqueue("https://a.example", 1)

        assert queue.enqueue("https://a.example", 2) is EnqueueResult.ALREADY_QUEUED
        assert queue.note_for("https://a.example") == 2
        assert queue.size() == 1

    def test_fifo_order(self):
        queue = FetchQueue()
        for note_id, url in enumerate(["https://a.example", "https://b.example", "https://c.example"]):
            queue.enqueue(url, note_id)

        assert queue.dequeue_front() == ("https://a.example", 0)
        assert queue.dequeue_front() == ("https://b.example", 1)
        assert queue.dequeue_front() == ("https://c.example", 2)
        assert queue.dequeue_front() is None

    def test_overwrite_keeps_position(self):
        """Re-requesting a queued URL does not move it to the back."""
        queue = FetchQueue()
        queue.enqueue("https://a.example", 1)
        queue.enqueue("https://b.example", 2)
        queue.enqueue("https://a.example", 3)

        assert queue.urls() == ["https://a.example", "https://b.example"]
        assert queue.dequeue_front() == ("https://a.example", 3)

    def test_peek_does_not_remove(self):
        queue = FetchQueue()
        assert queue.peek_front() is None

        queue.enqueue("https://a.example", "n1")
        assert queue.peek_front() == ("https://a.example", "n1")
        assert len(queue) == 1

    def test_remove(self):
        queue = FetchQueue()
        queue.enqueue("https://a.example", 1)
        queue.enqueue("https://b.example", 2)

        assert queue.remove("https://b.example") is True
        assert queue.remove("https://b.example") is False
        assert "https://b.example" not in queue
        assert queue.urls() == ["https://a.example"]

    def test_note_for_missing_url(self):
        assert FetchQueue().note_for("https://a.example") is None
