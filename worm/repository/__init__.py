"""SQLite storage for redeem servers, redeem codes and reminders."""