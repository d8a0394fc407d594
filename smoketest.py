from lostfound_ai.common.utils import setup_logging
from lostfound_ai.semantic_db import EmbeddingInput, EmbeddingGenerator, cosine_similarity

setup_logging()
gen = EmbeddingGenerator()

a = gen.generate(EmbeddingInput(text="Black leather wallet with a student ID inside"))
b = gen.generate(EmbeddingInput(text="Found a dark leather wallet containing an ID card"))

if a is None or b is None:
    raise SystemExit("embedding provider unavailable, check credentials and API enablement")

print(len(a), "dimensions")
print("self similarity:", round(cosine_similarity(a, a), 4))
print("pair similarity:", round(cosine_similarity(a, b), 4))
