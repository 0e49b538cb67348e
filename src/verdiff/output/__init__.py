"""Report serializers: JSON, Markdown, HTML and Rich terminal output."""
