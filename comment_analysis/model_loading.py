"""
Shared helpers for loading Hugging Face models onto a device
"""
import logging
from typing import Optional, Tuple

import torch
from packaging import version
from transformers import AutoTokenizer

logger = logging.getLogger(__name__)


def resolve_device(device: Optional[str] = None) -> str:
    if device:
        return device
    if torch.cuda.is_available():
        return "cuda"
    return "cpu"


def load_pretrained(model_cls, model_name: str) -> Tuple[object, object]:
    """Load tokenizer and model, retrying with trust_remote_code if the standard load fails"""
    try:
        logger.info(f"Loading tokenizer and model: {model_name}")
        tokenizer = AutoTokenizer.from_pretrained(model_name, trust_remote_code=False)
        model = model_cls.from_pretrained(model_name, trust_remote_code=False)
    except Exception as e:
        logger.warning(f"Standard loading failed: {e}")
        logger.info("Trying with trust_remote_code=True...")
        try:
            tokenizer = AutoTokenizer.from_pretrained(model_name, trust_remote_code=True)
            model = model_cls.from_pretrained(model_name, trust_remote_code=True)
        except Exception as e2:
            logger.error(f"Loading with trust_remote_code=True also failed: {e2}")
            raise
    return tokenizer, model


def prepare_model(model, device: str, use_fp16: bool = True, compile_model: bool = False):
    """Move a model to its device, in half precision on GPU, optionally compiled"""
    if device == "cuda":
        torch.backends.cuda.matmul.allow_tf32 = True  # potentially faster
        if use_fp16:
            logger.info("Converting model to half precision (fp16)")
            model = model.half()

    model = model.to(device)
    model.eval()

    if compile_model and version.parse(torch.__version__) >= version.parse("2.0") and device == "cuda":
        try:
            logger.info("Compiling model with torch.compile() for optimization")
            model = torch.compile(model)
        except Exception as compile_err:  # pragma: no cover
            logger.warning(f"torch.compile failed: {compile_err}. Continuing without compilation.")

    logger.info(f"Model loaded on {device} (fp16={use_fp16 and device == 'cuda'})")
    return model
