"""Framework adapters for shopcache."""
