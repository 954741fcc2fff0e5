"""
Loading comment batches from local JSON files
"""
import json
from pathlib import Path
from typing import List, Union

from .models import Comment


def load_comments_from_file(file_path: Union[str, Path]) -> List[Comment]:
    """Load comments from a JSON file, handling both v1 (string array) and v2 (object array) formats"""
    with open(file_path, 'r', encoding='utf-8') as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError(f"Expected JSON array, got {type(data).__name__}")

    comments = []
    for idx, item in enumerate(data):
        if isinstance(item, dict):
            comments.append(Comment.from_dict(item, default_id=idx))
        elif isinstance(item, str):
            # v1 format: plain comment text
            comments.append(Comment(id=str(idx), text=item))
        elif item is None:
            comments.append(Comment(id=str(idx), text=""))
        else:
            comments.append(Comment(id=str(idx), text=str(item)))

    return comments
