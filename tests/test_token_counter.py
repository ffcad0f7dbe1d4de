"""TokenCounter 测试"""

from skilldocs.context import TokenCounter


class TestTokenCounter:
    """测试文档 Token 计数"""

    def test_count_text(self):
        counter = TokenCounter()

        assert counter.count_text("") == 0
        assert counter.count_text("Expose liveness and readiness probes.") > 0

    def test_longer_text_counts_more(self):
        counter = TokenCounter()
        short = "Use cursor pagination."

        assert counter.count_text(short * 20) > counter.count_text(short)

    def test_document_cache(self):
        counter = TokenCounter()
        content = "# API Observability\n\nTrack the four golden signals.\n"

        first = counter.count_document(content)
        second = counter.count_document(content)

        assert first == second
        assert counter.get_cache_stats() == {"cached_documents": 1, "total_cached_tokens": first}

        counter.clear_cache()
        assert counter.get_cache_stats()["cached_documents"] == 0

    def test_unknown_model_falls_back(self):
        counter = TokenCounter(model="not-a-real-model")

        assert counter.count_text("hello world") > 0
