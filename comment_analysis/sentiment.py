"""
Local sentiment polarity for comments with a Hugging Face sequence classifier
"""
import logging
from typing import List, Optional, Tuple

import torch
from transformers import AutoModelForSequenceClassification

from .model_loading import load_pretrained, prepare_model, resolve_device

logger = logging.getLogger(__name__)

DEFAULT_SENTIMENT_MODEL = "distilbert-base-uncased-finetuned-sst-2-english"

POSITIVE_LABELS = {"POSITIVE", "POS", "LABEL_1"}
NEGATIVE_LABELS = {"NEGATIVE", "NEG", "LABEL_0"}


def label_to_polarity(label: str, score: float) -> float:
    """Map a classifier label and confidence to a polarity in [-1, 1]"""
    label = str(label).upper()
    score = max(0.0, min(1.0, float(score)))
    if label in POSITIVE_LABELS:
        return score
    if label in NEGATIVE_LABELS:
        return -score
    return 0.0


class SentimentClassifier:
    def __init__(self,
                 model_name: str = DEFAULT_SENTIMENT_MODEL,
                 device: Optional[str] = None,
                 use_fp16: bool = True,
                 compile_model: bool = False):
        """Initialize tokenizer/model with optional half-precision and Torch compile.

        Args:
            model_name: HuggingFace model id for binary sentiment classification
            device: "cuda" | "cpu" | "mps"; picked automatically when None
            use_fp16: Cast model to float16 when running on GPU for speed & memory
            compile_model: Run `torch.compile` (PyTorch >= 2.0) for kernel fusion
        """
        self.model_name = model_name
        self.device = resolve_device(device)

        self.tokenizer, model = load_pretrained(AutoModelForSequenceClassification, model_name)
        self.tokenizer.model_max_length = 512
        self.model = prepare_model(model, self.device, use_fp16=use_fp16, compile_model=compile_model)

        # Load labels dynamically from model config
        self.labels = [
            self.model.config.id2label[i]
            for i in range(self.model.config.num_labels)
        ]
        logger.info(f"Loaded {len(self.labels)} sentiment labels from model config: {self.labels}")

    def classify_batch(self, texts: List[str]) -> List[Tuple[str, float]]:
        """Classify a batch of texts and return (label, confidence) pairs"""
        inputs = self.tokenizer(
            texts,
            padding="longest",
            truncation=True,
            return_tensors="pt",
            max_length=512
        ).to(self.device)

        with torch.no_grad():
            logits = self.model(**inputs).logits
            probabilities = torch.softmax(logits.float(), dim=-1)
            scores, predicted = torch.max(probabilities, dim=-1)

        return [
            (self.labels[int(idx)], float(score))
            for idx, score in zip(predicted.cpu().numpy(), scores.cpu().numpy())
        ]

    def polarity_batch(self, texts: List[str]) -> List[float]:
        return [label_to_polarity(label, score) for label, score in self.classify_batch(texts)]
