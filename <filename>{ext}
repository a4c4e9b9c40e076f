<complete file content>

File names must be RELATIVE to the module root, without a src/ prefix.
Use {convention["entry_file"]} as the entry file.

Do NOT include explanations, only the files."""
