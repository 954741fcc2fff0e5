"""
Local sentence embeddings for comments with a Hugging Face encoder
"""
import logging
from typing import List, Optional

import numpy as np
import torch
from transformers import AutoModel

from .model_loading import load_pretrained, prepare_model, resolve_device

logger = logging.getLogger(__name__)

DEFAULT_EMBEDDING_MODEL = "sentence-transformers/all-MiniLM-L6-v2"


class CommentEmbedder:
    def __init__(self,
                 model_name: str = DEFAULT_EMBEDDING_MODEL,
                 device: Optional[str] = None,
                 use_fp16: bool = True,
                 compile_model: bool = False,
                 max_length: int = 256):
        """Initialise tokenizer/model with optional half-precision and Torch compile.

        Args:
            model_name: HuggingFace model id
            device: "cuda" | "cpu" | "mps"; picked automatically when None
            use_fp16: Cast model to float16 when running on GPU for speed & memory
            compile_model: Run `torch.compile` (PyTorch >= 2.0) for kernel fusion
            max_length: token limit per comment
        """
        self.model_name = model_name
        self.device = resolve_device(device)
        self.max_length = max_length

        self.tokenizer, model = load_pretrained(AutoModel, model_name)
        self.model = prepare_model(model, self.device, use_fp16=use_fp16, compile_model=compile_model)

    @property
    def dimension(self) -> int:
        return int(self.model.config.hidden_size)

    def prepare_comment(self, text: str) -> str:
        return " ".join(str(text).split())

    @torch.no_grad()
    def embed_batch(self, texts: List[str]) -> np.ndarray:
        """Embed a single batch of texts into L2-normalised vectors."""
        prepared_texts = [self.prepare_comment(text) for text in texts]

        encoded = self.tokenizer(
            prepared_texts,
            padding=True,
            truncation=True,
            max_length=self.max_length,
            return_tensors="pt"
        ).to(self.device)

        outputs = self.model(**encoded)

        # Mean pooling over real tokens (sentence-transformers convention)
        token_embeddings = outputs.last_hidden_state
        mask = encoded["attention_mask"].unsqueeze(-1).to(token_embeddings.dtype)
        summed = (token_embeddings * mask).sum(dim=1)
        counts = mask.sum(dim=1).clamp(min=1e-9)
        embeddings = torch.nn.functional.normalize(summed / counts, p=2, dim=1)

        return embeddings.float().cpu().numpy()

