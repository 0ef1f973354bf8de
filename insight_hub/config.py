from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter (optional; empty key selects the template planner/structurer)
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    openrouter_model: str = "deepseek/deepseek-r1:free"
    site_url: str = "http://localhost:3000"
    site_name: str = "Consultant's Company Insight Hub"
    llm_max_tokens: int = 8192
    llm_timeout_seconds: float = 120.0

    # Search backends
    google_search_api_key: str = ""
    google_search_engine_id: str = ""
    serpapi_key: str = ""
    search_query_budget: int = 15
    search_results_per_query: int = 5
    search_max_parallel_requests: int = 1
    search_request_delay_seconds: float = 0.1
    search_timeout_seconds: float = 30.0

    # Content retrieval
    fetch_links_per_query: int = 3
    content_retriever: str = "simulated"  # simulated | http
    fetch_max_parallel_requests: int = 4
    fetch_timeout_seconds: float = 20.0
    fetch_max_page_bytes: int = 2_000_000
    extractor_max_page_chars: int = 20000

    # Structuring
    structurer_context_char_budget: int = 15000

    # Record store
    record_store_backend: str = "memory"  # memory | file
    record_store_dir: str = ".cache/research/records"

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"
    log_to_file: bool = True

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def google_search_configured(self) -> bool:
        return bool(self.google_search_api_key and self.google_search_engine_id)

    @property
    def serpapi_configured(self) -> bool:
        return bool(self.serpapi_key)


settings = Settings()
