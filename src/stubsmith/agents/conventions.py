"""Language conventions and module structure hints used in stub prompts."""

STRUCTURE_EXAMPLES: dict[str, dict[str, str | list[str]]] = {
    "service": {
        "description": "CRUD service with business logic layer",
        "patterns": ["service", "repository interface", "models", "handlers/controllers"],
        "operations": ["Create", "Read/Get", "Update", "Delete", "List"],
        "includes": ["error handling", "dependency injection", "interfaces"],
    },
    "api": {
        "description": "REST API with routes and handlers",
        "patterns": ["router", "handlers", "middleware", "models", "requests/responses"],
        "operations": ["POST", "GET", "PUT", "DELETE", "PATCH"],
        "includes": ["validation", "error handling", "JSON serialization"],
    },
    "library": {
        "description": "Reusable library module",
        "patterns": ["main module", "utilities", "types/interfaces", "tests"],
        "operations": ["core functions", "helpers", "converters"],
        "includes": ["exports", "documentation", "type safety"],
    },
}

LANGUAGE_CONVENTIONS: dict[str, dict[str, str]] = {
    "go": {
        "file_ext": ".go",
        "todo_marker": "// TODO: Implement <name>",
        "file_naming": "snake_case",
        "function_naming": "PascalCase",
        "error_handling": "explicit return errors",
        "entry_file": "<module>.go",
        "default_style": "google",
    },
    "rust": {
        "file_ext": ".rs",
        "todo_marker": 'unimplemented!("<name>")',
        "file_naming": "snake_case",
        "function_naming": "snake_case",
        "error_handling": "Result<T, Error>",
        "entry_file": "mod.rs",
        "default_style": "rust",
    },
    "typescript": {
        "file_ext": ".ts",
        "todo_marker": "// TODO: Implement <name>",
        "file_naming": "camelCase",
        "function_naming": "camelCase",
        "error_handling": "throw errors or Promise.reject",
        "entry_file": "index.ts",
        "default_style": "airbnb",
    },
    "javascript": {
        "file_ext": ".js",
        "todo_marker": "// TODO: Implement <name>",
        "file_naming": "camelCase",
        "function_naming": "camelCase",
        "error_handling": "throw errors or Promise.reject",
        "entry_file": "index.js",
        "default_style": "airbnb",
    },
    "python": {
        "file_ext": ".py",
        "todo_marker": 'raise NotImplementedError("<name>")',
        "file_naming": "snake_case",
        "function_naming": "snake_case",
        "error_handling": "raise exceptions",
        "entry_file": "__init__.py",
        "default_style": "pep8",
    },
    "java": {
        "file_ext": ".java",
        "todo_marker": "// TODO: Implement <name>",
        "file_naming": "PascalCase",
        "function_naming": "camelCase",
        "error_handling": "throw exceptions",
        "entry_file": "<Module>.java",
        "default_style": "google",
    },
    "csharp": {
        "file_ext": ".cs",
        "todo_marker": "// TODO: Implement <name>",
        "file_naming": "PascalCase",
        "function_naming": "PascalCase",
        "error_handling": "throw exceptions",
        "entry_file": "<Module>.cs",
        "default_style": "microsoft",
    },
}
