"""Hypothesis strategies for pipegc ref-sets and activities."""

from hypothesis import strategies as st

# Keys and values may be any non-empty text without the separators.
ref_token = st.text(
    min_size=1,
    max_size=40,
    alphabet=st.characters(
        categories=("L", "N", "P", "S"),
        exclude_characters=",:",
    ),
)

sha = st.text(alphabet="0123456789abcdef", min_size=40, max_size=40)

change_ids = st.integers(min_value=1, max_value=99999).map(str)

merge_pairs = st.dictionaries(keys=change_ids, values=sha, max_size=8)

base_pair = st.tuples(ref_token, ref_token)

build_numbers = st.lists(
    st.integers(min_value=0, max_value=10_000), unique=True, max_size=30
)
