class Constants:
    TITLE = "FILE EXPLORER"
    HELP_HINT = "Key Mappings:<m>"
    ERROR_LOG_TITLE = "ERROR LOG"
    PATH_TITLE = "PATH"
    DISPLAY_ERROR_CAPACITY = 20

    DELETE_PROMPT = "The selected files will be deleted permanently, are you sure?"
    CHANGE_PATH_LABEL = "Change Path"
    NEW_FILE_LABEL = "New File"
    NEW_FILE_HINT = "End the name with / to create a directory"

    # (keys, description); a row with empty keys starts a new section.
    KEY_MAPPINGS = (
        ("", "Navigation"),
        ("j / Down", "Move cursor down (wraps)"),
        ("k / Up", "Move cursor up (wraps)"),
        ("Home", "Jump to first entry"),
        ("G / End", "Jump to last entry"),
        ("l / Right", "Enter directory under cursor"),
        ("h / Left", "Go to parent directory"),
        ("Enter", "Open file or enter directory"),
        ("Tab", "Change path"),
        ("", "Selection"),
        ("y / Space", "Toggle selection of entry under cursor"),
        ("c", "Clear selection"),
        ("v", "Paste selection into current directory"),
        ("x", "Delete selection (asks first)"),
        ("", "View"),
        ("d", "Cycle directory sorting"),
        ("s", "Sorting options"),
        ("g / .", "Toggle hidden files"),
        ("", "Other"),
        ("n", "New file (name/ for a directory)"),
        ("m", "Show this key mapping"),
        ("q / Ctrl+C", "Quit"),
    )
