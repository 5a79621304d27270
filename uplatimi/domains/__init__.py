"""Domain layer: payment-slip models and pure transformations.

Nothing here touches storage, the network or Streamlit.
"""
