"""AI chat client and the background redeem-code checker."""