"""Todo service: task CRUD with AI task parsing and analysis."""
