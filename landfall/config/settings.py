"""Post-processing settings registration."""

from landfall.core.settings_registry import (
    CheckboxField,
    HeadingField,
    TextField,
    register_settings,
)


@register_settings("postprocess", "Post-processing", order=10)
def postprocess_settings():
    return [
        HeadingField(
            key="move_heading",
            title="Moving",
            description="Completed jobs are moved from their intermediate directory into a final directory.",
        ),
        TextField(
            key="DEST_DIR",
            label="Destination Directory",
            description="Root directory under which final job directories are created.",
            default="/downloads/completed",
            placeholder="/downloads/completed",
        ),
        CheckboxField(
            key="APPEND_CATEGORY_DIR",
            label="Append Category Directory",
            description="Create a subdirectory named after the job category inside the destination directory.",
            default=True,
        ),
        HeadingField(
            key="cleanup_heading",
            title="Cleanup",
            description="Files matching these extensions are deleted from job directories after processing.",
        ),
        TextField(
            key="EXT_CLEANUP_DISK",
            label="Cleanup Extensions",
            description="Comma or semicolon separated list of extensions or wildcard masks, e.g. .par2, .sfv, *sample*.",
            default=".par2, .sfv",
            placeholder=".par2, .sfv, .nfo",
        ),
    ]
